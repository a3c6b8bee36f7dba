'''
The header shared by all the chunks of the format

    u16 type
    u16 header_size
    u32 chunk_size

header_size covers these 8 bytes plus the fields specific to the type of the
chunk, chunk_size covers the whole chunk (header included).
'''
import logging
from typing import Iterator, Tuple

from ..core import Chunk
from .. import fields
from ..exceptions import MalformedChunk, WrongChunkType
from ..streams import Stream
from .enum import ResChunkType


logger = logging.getLogger(__name__)


class ChunkTypeField(fields.StructField):
    '''The tag of the chunk: it must match the CHUNK_TYPE of the chunk containing it,
    when the chunk declares one.'''

    def __init__(self, **kw):
        super().__init__('H', enum=ResChunkType, default=ResChunkType.RES_NULL_TYPE, is_magic=True, **kw)

    def check_magic(self, value):
        expected = getattr(self.father, 'CHUNK_TYPE', None)

        if expected is not None and value != expected:
            raise WrongChunkType(expected, value)


class ResChunkHeader(Chunk):
    SIZE = 8
    CHUNK_TYPE = None

    type        = ChunkTypeField()
    header_size = fields.StructField('H', default=SIZE)
    chunk_size  = fields.StructField('I', default=SIZE)

    def init(self):
        super().init()
        if self.CHUNK_TYPE is not None:
            self.type.value = self.CHUNK_TYPE

    @property
    def end(self) -> int:
        '''Absolute position in the stream where the chunk ends'''
        return self.origin + self.chunk_size.value

    def validate(self):
        header_size = self.header_size.value
        chunk_size = self.chunk_size.value

        if header_size < ResChunkHeader.SIZE:
            raise MalformedChunk(f'header size {header_size:#x} smaller than the generic header', chain=['header_size'])

        if chunk_size < header_size:
            raise MalformedChunk(f'chunk size {chunk_size:#x} smaller than header size {header_size:#x}', chain=['chunk_size'])


class ResChunk(ResChunkHeader):
    '''Base class for the concrete chunks: the subclasses set CHUNK_TYPE and
    declare the fields following the generic header.'''

    @classmethod
    def get(cls, buf):
        '''Decode the chunk starting at the current position of buf (or at
        the start of it, if it's not a Stream).'''
        return cls(buf)

    def put(self, output):
        '''Encode the chunk at the current position of output.'''
        self.pack(output if isinstance(output, Stream) else Stream(output))


def read_header(stream: Stream) -> Tuple[object, int, int]:
    '''Read the generic header at the position of the stream, leaving the cursor after it.'''
    header = ResChunkHeader(stream)

    return header.type.value, header.header_size.value, header.chunk_size.value


def write_header(chunk_type, header_size: int, chunk_size: int, stream: Stream):
    header = ResChunkHeader()
    header.type.value = chunk_type
    header.header_size.value = header_size
    header.chunk_size.value = chunk_size

    header.pack(stream)


def peek_chunk_type(stream: Stream):
    '''Return the tag of the chunk at the position of the stream without moving it.'''
    field = ChunkTypeField()
    with stream.saved():
        field.unpack(stream)

    return field.value


def iter_chunks(stream: Stream, end: int = None) -> Iterator[ResChunkHeader]:
    '''Walk the sibling chunks from the position of the stream up to end.

    When a header is yielded the stream is at the start of its chunk, so the
    caller can decode it; then the walk continues after the chunk, wherever
    the caller left the cursor. A chunk overflowing end stops the walk.'''
    end = len(stream) if end is None else end

    while stream.tell() < end:
        with stream.saved():
            header = ResChunkHeader(stream)

        if header.end > end:
            raise MalformedChunk(f'chunk at {header.origin:#x} ends at {header.end:#x}, past {end:#x}')

        logger.debug('found %s at %#x' % (header.type.value, header.origin))

        yield header

        stream.seek(header.end)
