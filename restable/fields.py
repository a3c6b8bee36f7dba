"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable: fixed-width integers and ranges of bytes.
"""
import logging
import struct
from enum import Enum

from .enum import Compliant
from .meta import FieldBase, Endianess
from .properties import resolve
from .streams import Stream
from .views import ByteRangeView
from .exceptions import UnpackException, MagicException


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, compliant=Compliant.INHERIT, is_magic=False):
        super().__init__()
        self.logger = logging.getLogger(__name__)
        self.name = name
        self.father = father
        self.default = default
        # the offset is relative to the start of the father chunk and can
        # be fixed by the format (possibly via a Dependency) or be found
        # during the unpacking
        self.declared_offset = offset
        self.offset = offset if isinstance(offset, int) else None
        self.endianess = endianess
        self.compliant = compliant
        self.is_magic = is_magic

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    @property
    def father_origin(self) -> int:
        '''Absolute position in the stream where the father starts'''
        return self.father.origin if self.father is not None else 0

    def is_compliant(self, level):
        instance = self
        while instance is not None:
            if instance.compliant & level:
                return True
            if not instance.compliant & Compliant.INHERIT:
                break

            instance = instance.father

        return False

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
    )

    def seek_declared(self, stream: Stream):
        '''Move the stream where the field starts, if the format says so.'''
        if self.declared_offset is not None:
            stream.seek(self.father_origin + resolve(self.declared_offset, self))

        self.offset = stream.tell() - self.father_origin

    def pack(self, stream: Stream, value=None):
        raise NotImplementedError('you need to implement this in the subclass')

    def unpack(self, stream: Stream):
        raise NotImplementedError('you need to implement this in the subclass')


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.

    The "enum" argument takes some subclass of enum.Enum so to have directly
    a representation of the integer value of the field itself.
    """

    def __init__(self, format, default=0, enum=None, **kw):
        self.format = format
        self.enum = enum
        super().__init__(default=default, **kw)

    def __repr__(self):
        if isinstance(self.value, Enum):
            return f'<{self.__class__.__name__}({self.value!r})>'

        return '<%s(%s)>' % (self.__class__.__name__, hex(self.value))

    def __str__(self):
        width = self.size * 2
        value = self.value.value if isinstance(self.value, Enum) else self.value
        return '0x%0*x' % (width, value)

    def __int__(self):
        return self.value.value if isinstance(self.value, Enum) else self.value

    def value_from_default(self):
        if self.enum is None or isinstance(self.default, Enum):
            return self.default

        return self.enum(self.default)

    def get_format(self):
        return self.endianess.prefix + self.format

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def encode(self, value) -> bytes:
        if isinstance(value, Enum):
            value = value.value

        return struct.pack(self.get_format(), value)

    def _get_raw(self) -> bytes:
        return self.encode(self.value)

    def _unpack_struct(self, raw: bytes) -> int:
        try:
            return struct.unpack(self.get_format(), raw)[0]
        except struct.error as e:
            raise UnpackException(str(e)) from e

    def _unpack_enum(self, value: int):
        try:
            return self.enum(value)
        except ValueError:
            if self.is_compliant(Compliant.ENUM):
                raise UnpackException(f'{self.enum.__name__} has no member with value {value:#x}')

            self.logger.warning(f'enum {self.enum.__name__} doesn\'t have element with value 0x{value:x} in it')

            return value

    def check_magic(self, value):
        if value == self.default:
            return

        self.logger.warning(f'the magic doesn\'t correspond: {value!r} instead of {self.default!r}')
        if self.is_compliant(Compliant.MAGIC):
            raise MagicException(f'found {value!r} instead of {self.default!r}')

    def unpack(self, stream: Stream):
        self.seek_declared(stream)

        value = self._unpack_struct(stream.read(self.size))
        if self.enum:
            value = self._unpack_enum(value)

        if self.is_magic:
            self.check_magic(value)

        self.value = value

    def pack(self, stream: Stream, value=None):
        stream.write(self.encode(self.value if value is None else value))


class ViewField(Field):
    """Represent a contiguous range of bytes of the stream without copying it.

    The length can be an integer or a Dependency that is resolved at the moment
    of the unpacking."""

    def __init__(self, n=0, **kw):
        self.n = n
        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%r)>' % (self.__class__.__name__, self.value)

    def __str__(self):
        return self.value.tobytes().hex()

    def __len__(self):
        return len(self.value)

    def value_from_default(self):
        if self.default is not None:
            return ByteRangeView(self.default)

        length = self.n if isinstance(self.n, int) else 0
        return ByteRangeView(b'\x00' * length)

    def _get_size(self):
        return len(self.value)

    def _get_raw(self) -> bytes:
        return self.value.tobytes()

    def unpack(self, stream: Stream):
        self.seek_declared(stream)

        length = resolve(self.n, self)
        self.logger.debug('view of %d bytes at %#x' % (length, stream.tell()))

        self.value = stream.view(stream.tell(), length)
        stream.seek(self.value.end)

    def pack(self, stream: Stream, value=None):
        view = self.value if value is None else value
        stream.write(view.memory() if isinstance(view, ByteRangeView) else view)
