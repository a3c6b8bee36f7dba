'''
Non-owning windows over a buffer.

Every variable-length section of a chunk is represented by a ByteRangeView,
i.e. the triple (base, offset, length): the bytes stay where they are in the
buffer the chunk was decoded from and are copied only when explicitly asked
with tobytes() or copy().
'''
import struct
from typing import Iterator, Tuple

from .exceptions import OutOfBounds


class ByteRangeView(object):
    '''Read-only view of the bytes [offset, offset + length) of base.

    The base must outlive the view and must not be modified while the
    view is in use.
    '''

    def __init__(self, base, offset: int = 0, length: int = None):
        if length is None:
            length = len(base) - offset

        if offset < 0 or length < 0 or offset + length > len(base):
            raise OutOfBounds(
                f'range [{offset:#x}, {offset + length:#x}) outside buffer of {len(base):#x} bytes')

        self.base = base
        self.offset = offset
        self.length = length

    def __len__(self):
        return self.length

    def __repr__(self):
        return '<%s(offset=%#x, length=%#x)>' % (self.__class__.__name__, self.offset, self.length)

    def __bytes__(self):
        return self.tobytes()

    def __eq__(self, other):
        if isinstance(other, ByteRangeView):
            other = other.memory()
        elif not isinstance(other, (bytes, bytearray, memoryview)):
            return NotImplemented

        return self.memory() == other

    @property
    def end(self) -> int:
        return self.offset + self.length

    def slice(self, extra_offset: int, length: int) -> 'ByteRangeView':
        '''Return a view of length bytes starting at extra_offset from the start of this one.'''
        if extra_offset < 0 or length < 0 or extra_offset + length > self.length:
            raise OutOfBounds(
                f'slice [{extra_offset:#x}, {extra_offset + length:#x}) outside view of {self.length:#x} bytes')

        return ByteRangeView(self.base, self.offset + extra_offset, length)

    def memory(self) -> memoryview:
        return memoryview(self.base)[self.offset:self.end]

    def tobytes(self) -> bytes:
        return bytes(self.memory())

    def copy(self) -> 'ByteRangeView':
        '''Detach the view from its base.'''
        return ByteRangeView(self.tobytes())

    def unpack_from(self, fmt: str, offset: int = 0) -> Tuple:
        size = struct.calcsize(fmt)
        if offset < 0 or offset + size > self.length:
            raise OutOfBounds(f'reading {size} bytes at {offset:#x} outside view of {self.length:#x} bytes')

        return struct.unpack_from(fmt, self.base, self.offset + offset)

    def iter_unpack(self, fmt: str) -> Iterator[Tuple]:
        size = struct.calcsize(fmt)
        if self.length % size:
            raise OutOfBounds(f'view of {self.length:#x} bytes is not a multiple of {size}')

        for offset in range(0, self.length, size):
            yield struct.unpack_from(fmt, self.base, self.offset + offset)
