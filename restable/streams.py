import logging
import os
import struct
from contextlib import contextmanager

from .exceptions import OutOfBounds, BufferTooSmall
from .views import ByteRangeView


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes-like/file objects to
    uniform their properties: we need random access to the data, a cursor that
    can jump back and forth and the possibility to hand out views of the
    underlying buffer without copying it.

    Passing nothing creates a growable sink for packing, passing a bytearray
    (or a writable memoryview) creates a sink with fixed capacity.'''

    def __init__(self, obj=None):
        '''Here we normalize the object in order to be accessed as a buffer'''
        self._type = type(obj)
        self.obj = obj
        self.growable = False
        self.position = 0
        self.history = []

        if isinstance(obj, os.PathLike):
            obj = os.fspath(obj)

        init_method_name = 'init_%s' % obj.__class__.__name__

        init_method = getattr(self, init_method_name, None)

        if init_method is None:
            if not hasattr(obj, 'read'):
                raise ValueError('\'%s\' is the wrong kind of object to use as stream' % obj.__class__.__name__)
            init_method = self.init_file

        init_method(obj)

    def __repr__(self):
        return '<%s(type=%s, position=%#x, size=%#x)>' % (
            self.__class__.__name__, self._type.__name__, self.position, len(self))

    def __len__(self):
        return len(self.buffer)

    def init_str(self, path):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'' % path)
        with open(path, 'rb') as f:
            self.buffer = f.read()

    def init_file(self, obj):
        logger.debug('reading from file object %r' % obj)
        self.buffer = obj.read()

    def init_bytes(self, obj):
        self.buffer = obj

    def init_bytearray(self, obj):
        self.buffer = obj

    def init_memoryview(self, obj):
        self.buffer = obj

    def init_NoneType(self, obj):
        self.buffer = bytearray()
        self.growable = True

    @property
    def writable(self) -> bool:
        if isinstance(self.buffer, memoryview):
            return not self.buffer.readonly
        return isinstance(self.buffer, bytearray)

    @property
    def remaining(self):
        '''Bytes available from the cursor to the end, None if the stream grows on demand.'''
        if self.growable:
            return None

        return len(self.buffer) - self.position

    def tell(self) -> int:
        return self.position

    def seek(self, offset: int):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        if offset < 0 or (offset > len(self.buffer) and not self.growable):
            raise OutOfBounds(f'seeking at {offset:#x} outside stream of {len(self.buffer):#x} bytes')

        self.position = offset

        return self

    def skip(self, count: int):
        return self.seek(self.position + count)

    def peek(self, size: int) -> bytes:
        if self.position + size > len(self.buffer):
            raise OutOfBounds(
                f'cannot read {size} bytes at {self.position:#x}, stream has {len(self.buffer):#x} bytes')

        return bytes(self.buffer[self.position:self.position + size])

    def read(self, size: int) -> bytes:
        data = self.peek(size)
        self.position += size

        return data

    def peek_struct(self, fmt: str):
        '''Unpack a single value at the cursor without moving it.'''
        return struct.unpack(fmt, self.peek(struct.calcsize(fmt)))[0]

    def read_all(self) -> bytes:
        return self.read(len(self.buffer) - self.position)

    def view(self, offset: int, length: int) -> ByteRangeView:
        '''Return a view of the underlying buffer without touching the cursor.'''
        return ByteRangeView(self.buffer, offset, length)

    def write(self, data) -> int:
        if not self.writable:
            raise ValueError(f'stream backed by {self._type.__name__} is read-only')

        size = len(data)
        end = self.position + size

        if end > len(self.buffer):
            if not self.growable:
                raise BufferTooSmall(
                    f'cannot write {size} bytes at {self.position:#x}, capacity is {len(self.buffer):#x} bytes')
            self.buffer.extend(b'\x00' * (end - len(self.buffer)))

        self.buffer[self.position:end] = data
        self.position = end

        return size

    def getvalue(self) -> bytes:
        return bytes(self.buffer)

    def save(self):
        self.history.append(self.position)

    def restore(self):
        self.position = self.history.pop()

    @contextmanager
    def saved(self):
        '''Restore the cursor when the block exits.'''
        self.save()
        try:
            yield self
        finally:
            self.restore()
