"""
Core module for the abstraction of a binary format

"""
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import RestableException


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: its fields are
    declared as class attributes and are un/packed in the order of declaration.

    Passing some data (anything Stream() accepts, or a Stream itself) to the
    constructor unpacks it immediately.
    """

    def __init__(self, data=None, **kwargs):
        self.origin = 0
        super().__init__(**kwargs)

        if data is not None:
            stream = data if isinstance(data, Stream) else Stream(data)
            self.logger.debug('unpacking \'%s\' from %r' % (self.__class__.__name__, stream))
            self.unpack(stream)

    def init(self):
        for _, field in self.get_fields():
            field.init()

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, field)
        return msg

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented

        return all(
            field.value == getattr(other, field_name).value for field_name, field in self.get_fields()
        )

    @property
    def value(self):
        return {field_name: field.value for field_name, field in self.get_fields()}

    def _get_size(self):
        '''the size MUST be derived from the fields'''
        return sum(field.size for _, field in self.get_fields())

    def _get_raw(self) -> bytes:
        value = b''
        for field_name, field in self.get_fields():
            field_raw = field.raw
            self.logger.debug("field '{}' raw={}".format(field_name, field_raw))
            value += field_raw

        return value

    @classmethod
    def offset_of(cls, field_name: str) -> int:
        '''Offset of a field preceded only by fixed-size fields.'''
        offset = 0
        for name in cls._meta.fields:
            if name == field_name:
                return offset
            offset += getattr(cls, name).size

        raise AttributeError(f'{cls.__name__} has no field named {field_name!r}')

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def pack_field(self, stream: Stream, field_name: str, value=None):
        self.logger.debug('packing %s.%s at %#x' % (self.__class__.__name__, field_name, stream.tell()))
        getattr(self, field_name).pack(stream, value)

    def pack(self, stream=None, value=None):
        '''Encode the chunk into the stream (a new growable one if not given)
        and return the content of the stream.'''
        stream = Stream() if stream is None else stream

        for field_name in self.get_ordered_fields_name():
            self.pack_field(stream, field_name)

        return stream.getvalue()

    def unpack_field(self, stream: Stream, field_name: str):
        field = getattr(self, field_name)
        self.logger.debug('unpacking %s.%s at %#x' % (self.__class__.__name__, field_name, stream.tell()))

        try:
            field.unpack(stream)
        except RestableException as e:
            e.chain.append(field_name)
            raise

    def unpack(self, stream: Stream):
        '''This is one of the main APIs to take care of: its aim is to take a binary
        data and transform in the representation given by the class this method
        is implemented.

        The offsets of the fields are relative to the position of the stream
        at the moment of the call: this is saved as the origin of the chunk.
        '''
        self.seek_declared(stream)
        self.origin = stream.tell()

        for field_name in self.get_ordered_fields_name():
            self.unpack_field(stream, field_name)

        if hasattr(self, 'validate'):
            self.validate()
