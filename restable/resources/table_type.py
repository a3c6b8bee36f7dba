'''
# Table type chunk

ResTableType is the chunk holding the values of the resources of a given type
(string, drawable, layout...) for a given configuration. It consists of

    ResChunk_header
       u16 type (RES_TABLE_TYPE_TYPE)
       u16 header_size
       u32 chunk_size
    u8  id            1-based id of the type
    u8  flags         padding for older producers
    u16 reserved
    u32 entry_count
    u32 entries_start
    ResTable_config
       u32 size
       u8[size - 4] data

The header is followed by entry_count u32s, the offsets from entries_start of
the data of each entry; an offset of NO_ENTRY means the resource has no value
in this configuration. After the offsets comes the entry data: each entry is
a ResTable_entry (u16 size, u16 flags, u32 key) followed by a Res_value or,
for complex entries, by a map. The content of the configuration and of the
entries is not interpreted here.

Decoding doesn't copy anything: config, entry_offsets and entry_data are views
of the buffer the chunk was decoded from. Encoding always writes the entries
right after the offsets, recomputing entries_start.
'''
import logging
import struct
from typing import Iterator, Optional

from .. import fields
from ..exceptions import MalformedChunk, BufferTooSmall, EncodeLengthMismatch
from ..properties import Dependency
from ..streams import Stream
from ..views import ByteRangeView
from .chunk import ResChunk
from .enum import ResChunkType, ResTableTypeFlags


logger = logging.getLogger(__name__)


class ResTableType(ResChunk):
    CHUNK_TYPE = ResChunkType.RES_TABLE_TYPE_TYPE
    NO_ENTRY = 0xffffffff

    id            = fields.StructField('B', default=1)
    flags         = fields.StructField('B', enum=ResTableTypeFlags, default=ResTableTypeFlags.NONE)
    reserved      = fields.StructField('H')
    entry_count   = fields.StructField('I')
    entries_start = fields.StructField('I')
    config        = fields.ViewField(Dependency('.config_size'))
    entry_offsets = fields.ViewField(Dependency('.entry_offsets_size'), offset=Dependency('.header_size'))
    entry_data    = fields.ViewField(Dependency('.entry_data_size'), offset=Dependency('.entries_start'))

    def __str__(self):
        present = self.count_present()
        return '\n'.join([
            f'{self.type.value.name} at {self.origin:#x}:',
            f'  header size:   {self.header_size.value:#x}',
            f'  chunk size:    {self.chunk_size.value:#x}',
            f'  type id:       {self.id.value:#x}',
            f'  flags:         {self.flags.value}',
            f'  config:        {self.config}',
            f'  entries:       {self.entry_count.value} ({present} present)',
            f'  entries start: {self.entries_start.value:#x}',
            f'  entry data:    {len(self.entry_data)} bytes',
        ])

    # sizes of the sections as derived from the header

    def config_size(self) -> int:
        '''Size of the configuration, its own u32 size included.'''
        return self.header_size.value - CONFIG_OFFSET

    def entry_offsets_size(self) -> int:
        return 4 * self.entry_count.value

    def entry_data_size(self) -> int:
        return self.chunk_size.value - self.header_size.value - self.entry_offsets_size()

    def canonical_entries_start(self) -> int:
        return self.header_size.value + self.entry_offsets_size()

    @property
    def resource_type_id(self) -> int:
        '''0-based id of the type of the resources.'''
        return self.id.value - 1

    @property
    def resource_type(self) -> int:
        return self.id.value

    def get_entry_offset(self, index: int) -> Optional[int]:
        '''Offset of the entry from entries_start, None if the entry has no value.'''
        if not 0 <= index < self.entry_count.value:
            raise IndexError(f'entry {index} out of {self.entry_count.value}')

        offset, = self.entry_offsets.value.unpack_from('<I', 4 * index)

        return None if offset == self.NO_ENTRY else offset

    def iter_entry_offsets(self) -> Iterator[Optional[int]]:
        for offset, in self.entry_offsets.value.iter_unpack('<I'):
            yield None if offset == self.NO_ENTRY else offset

    def has_entry(self, index: int) -> bool:
        return self.get_entry_offset(index) is not None

    def count_present(self) -> int:
        return sum(1 for _ in self.iter_entry_offsets() if _ is not None)

    def copy(self) -> 'ResTableType':
        '''Return the same chunk detached from the buffer it was decoded from.'''
        other = self.__class__()
        for field_name, field in self.get_fields():
            value = field.value
            getattr(other, field_name).value = value.copy() if isinstance(value, ByteRangeView) else value

        return other

    @classmethod
    def from_parts(cls, resource_type_id: int, config, entry_offsets, entry_data,
                   flags=ResTableTypeFlags.NONE, reserved=0) -> 'ResTableType':
        '''Build a chunk laid out canonically.

        The config must include its own size, the entry offsets can be raw
        bytes or a sequence of integers where None stands for NO_ENTRY.'''
        if not 0 <= resource_type_id < 0xff:
            raise ValueError(f'resource type id {resource_type_id} doesn\'t fit the format')

        if not isinstance(entry_offsets, (bytes, bytearray, memoryview)):
            entry_offsets = [cls.NO_ENTRY if _ is None else _ for _ in entry_offsets]
            for offset in entry_offsets:
                if not 0 <= offset <= cls.NO_ENTRY:
                    raise ValueError(f'entry offset {offset:#x} doesn\'t fit in a u32')
            entry_offsets = struct.pack('<%dI' % len(entry_offsets), *entry_offsets)

        if len(entry_offsets) % 4:
            raise ValueError('the entry offsets must be u32s')

        chunk = cls()
        chunk.id.value = resource_type_id + 1
        chunk.flags.value = flags
        chunk.reserved.value = reserved
        chunk.entry_count.value = len(entry_offsets) // 4
        chunk.config.value = ByteRangeView(bytes(config))
        chunk.entry_offsets.value = ByteRangeView(bytes(entry_offsets))
        chunk.entry_data.value = ByteRangeView(bytes(entry_data))
        chunk.header_size.value = CONFIG_OFFSET + len(chunk.config)
        chunk.chunk_size.value = chunk.header_size.value + len(chunk.entry_offsets) + len(chunk.entry_data)

        return cls(chunk.pack())

    def unpack(self, stream: Stream):
        '''Decode the chunk at the position of the stream and leave the stream
        at the end of it, where the following sibling starts.

        All the sizes are checked before creating any view: the header must
        account exactly for the configuration and the data left after the
        offsets can't be negative. The entries_start is taken as it is but
        the entry data must lie inside the chunk.'''
        self.origin = stream.tell()

        names = self.get_ordered_fields_name()
        sections = names.index('config')

        for field_name in names[:sections]:
            self.unpack_field(stream, field_name)

        self.validate()

        if self.id.value == 0:
            raise MalformedChunk('resource type id must be 1-based', chain=['id'])

        config_size = stream.peek_struct('<I')
        if self.header_size.value != CONFIG_OFFSET + config_size:
            raise MalformedChunk(
                f'header size {self.header_size.value:#x} doesn\'t match config size {config_size:#x}',
                chain=['header_size'])

        entry_data_size = self.entry_data_size()
        if entry_data_size < 0:
            raise MalformedChunk(
                f'chunk size {self.chunk_size.value:#x} too small for {self.entry_count.value} entries',
                chain=['chunk_size'])

        if self.entries_start.value + entry_data_size > self.chunk_size.value:
            raise MalformedChunk(
                f'entries start {self.entries_start.value:#x} leaves the entry data outside the chunk',
                chain=['entries_start'])

        if self.entries_start.value != self.canonical_entries_start():
            logger.warning(
                f'entries start {self.entries_start.value:#x} instead of {self.canonical_entries_start():#x}')

        for field_name in names[sections:]:
            self.unpack_field(stream, field_name)

        stream.seek(self.end)

    def pack(self, stream=None, value=None, preserve_reserved=True):
        '''Encode the chunk with the entry data right after the offsets.

        Nothing is written if the sections don't add up to chunk_size or if
        the stream can't hold the whole chunk. With preserve_reserved=False
        the flags and the reserved field are written as zero, like the first
        producers of this format do.'''
        stream = Stream() if stream is None else stream
        chunk_size = self.chunk_size.value

        if self.size != chunk_size:
            raise EncodeLengthMismatch(f'the fields take {self.size:#x} bytes for a chunk of {chunk_size:#x}')

        if stream.remaining is not None and stream.remaining < chunk_size:
            raise BufferTooSmall(f'{stream.remaining:#x} bytes left, chunk needs {chunk_size:#x}')

        overrides = {
            'entries_start': self.canonical_entries_start(),
        }
        if not preserve_reserved:
            overrides.update(flags=0, reserved=0)

        for field_name in self.get_ordered_fields_name():
            self.pack_field(stream, field_name, overrides.get(field_name))

        return stream.getvalue()


# fixed-size fields before the configuration: the generic header plus
# id, flags, reserved, entry_count and entries_start
CONFIG_OFFSET = ResTableType.offset_of('config')
ResTableType.CONFIG_OFFSET = CONFIG_OFFSET
