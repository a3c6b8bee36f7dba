import copy
import logging
from enum import Enum, auto


class Endianess(Enum):
    LITTLE_ENDIAN = auto()
    BIG_ENDIAN    = auto()

    @property
    def prefix(self):
        return '<' if self is Endianess.LITTLE_ENDIAN else '>'


class FieldDescriptor(object):
    """Give to each Chunk instance its own copy of the field declared in the class."""

    def __init__(self, field_instance: "Field", field_name: str):
        self.logger = logging.getLogger(f"{self.__module__}.{self.__class__.__name__}")
        self.field = field_instance
        self.field.name = field_name

    def __get__(self, instance, owner=None):
        if instance is None:
            return self.field

        data = instance.__dict__

        if self.field.name not in data:
            self.logger.debug("create new field for field named '%s'", self.field.name)
            data[self.field.name] = self.field.create(father=instance)

        return data[self.field.name]

    def __set__(self, instance, value):
        data = instance.__dict__

        # a field of the same kind replaces the one we have
        if isinstance(value, self.field.__class__):
            value.father = instance
            value.name = self.field.name
            data[self.field.name] = value
        # otherwise is the value of the field
        else:
            self.__get__(instance).value = value


class FieldBase(object):

    def contribute_to_chunk(self, cls, name):
        if name in cls.__dict__:
            raise AttributeError(f'field {name} is already present in class {cls.__name__}')

        setattr(cls, name, FieldDescriptor(self, name))

    def create(self, father):
        instance = copy.deepcopy(self)
        instance.father = father
        return instance


class Meta(object):
    """Class containing metadata about the format"""

    def __init__(self):
        self.fields = []


class MetaChunk(type):
    '''Collect the fields declared in the body of a Chunk (and of its parents)
    keeping the order of declaration, that is the order on the wire.'''

    logger = logging.getLogger(__name__)

    def __new__(cls, name, bases, attrs):
        declared = {
            key: value for key, value in attrs.items() if hasattr(value, 'contribute_to_chunk')
        }
        attrs = {key: value for key, value in attrs.items() if key not in declared}

        new_cls = super().__new__(cls, name, bases, attrs)
        new_cls._meta = Meta()

        # handle inheritance
        for parent in bases:
            if not isinstance(parent, MetaChunk):
                continue
            for field_name in parent._meta.fields:
                if field_name not in new_cls._meta.fields:
                    new_cls._meta.fields.append(field_name)

        for field_name, field in declared.items():
            new_cls.add_to_class(field_name, field)

        return new_cls

    def add_to_class(cls, name, value):
        cls.logger.debug('contribute_to_chunk() found for field \'%s\'' % name)
        cls._meta.fields.append(name)
        value.contribute_to_chunk(cls, name)
