import struct

import pytest

from restable.exceptions import (
    MalformedChunk,
    WrongChunkType,
    OutOfBounds,
    BufferTooSmall,
    EncodeLengthMismatch,
)
from restable.resources import (
    ResChunkType,
    ResTableType,
    ResTableTypeFlags,
    CONFIG_OFFSET,
    iter_chunks,
)
from restable.streams import Stream
from restable.views import ByteRangeView

from conftest import CONFIG, ENTRY_OFFSETS, ENTRY_DATA


def test_config_offset_is_derived_from_the_fields():
    assert CONFIG_OFFSET == 20
    assert ResTableType.CONFIG_OFFSET == CONFIG_OFFSET


def test_decode(table_type_raw):
    stream = Stream(table_type_raw)

    chunk = ResTableType.get(stream)

    assert chunk.type.value == ResChunkType.RES_TABLE_TYPE_TYPE
    assert chunk.header_size.value == 24
    assert chunk.chunk_size.value == 36
    assert chunk.resource_type_id == 0
    assert chunk.resource_type == 1
    assert chunk.flags.value == ResTableTypeFlags.NONE
    assert chunk.reserved.value == 0
    assert chunk.entry_count.value == 2
    assert chunk.entries_start.value == 32
    assert chunk.config.value == CONFIG
    assert chunk.entry_offsets.value == ENTRY_OFFSETS
    assert chunk.entry_data.value == ENTRY_DATA

    assert stream.tell() == 36


def test_decode_doesnt_copy(table_type_raw):
    chunk = ResTableType(table_type_raw)

    for field in (chunk.config, chunk.entry_offsets, chunk.entry_data):
        assert field.value.base is table_type_raw

    assert chunk.layout == {
        'type': (0, 2),
        'header_size': (2, 2),
        'chunk_size': (4, 4),
        'id': (8, 1),
        'flags': (9, 1),
        'reserved': (10, 2),
        'entry_count': (12, 4),
        'entries_start': (16, 4),
        'config': (20, 4),
        'entry_offsets': (24, 8),
        'entry_data': (32, 4),
    }


def test_encode_canonical_is_identity(table_type_raw):
    chunk = ResTableType(table_type_raw)

    assert chunk.pack() == table_type_raw

    output = bytearray(36)
    chunk.put(output)

    assert output == table_type_raw


def test_round_trip():
    chunk = ResTableType.from_parts(
        5,
        struct.pack('<I', 8) + b'\x01\x02\x03\x04',
        [0, None, 8, None],
        b'\x08\x00\x00\x00\x2a\x00\x00\x00' * 2,
    )

    assert chunk.entries_start.value == chunk.canonical_entries_start()
    assert ResTableType(chunk.pack()) == chunk


def test_encode_normalizes_entries_start(table_type_raw, patch):
    # the entry data starts inside the offsets
    raw = patch(table_type_raw, 16, struct.pack('<I', 28))
    chunk = ResTableType(raw)

    assert chunk.entries_start.value == 28
    assert chunk.entry_data.value == b'\x00\x00\x00\x00'

    encoded = ResTableType(chunk.pack())

    assert chunk.entries_start.value == 28
    assert encoded.entries_start.value == encoded.header_size.value + 4 * encoded.entry_count.value
    assert encoded.entry_data.value == chunk.entry_data.value
    assert encoded.entry_offsets.value == chunk.entry_offsets.value


def test_size_conservation(table_type_raw):
    chunks = [
        ResTableType(table_type_raw),
        ResTableType.from_parts(0, CONFIG, [], b''),
        ResTableType.from_parts(0x10, b'\x40' + b'\x00' * 0x3f, [None] * 10, b'\x00' * 0x40),
    ]

    for chunk in chunks:
        for _chunk in (chunk, ResTableType(chunk.pack())):
            assert (
                len(_chunk.config) + 4 * _chunk.entry_count.value + len(_chunk.entry_data) + CONFIG_OFFSET
            ) == _chunk.chunk_size.value


def test_reject_wrong_header_size(table_type_raw, patch):
    raw = patch(table_type_raw, 2, b'\x1c\x00')

    with pytest.raises(MalformedChunk) as excinfo:
        ResTableType(raw)

    assert excinfo.value.chain == ['header_size']


def test_reject_negative_entry_data_size(table_type_raw, patch):
    raw = patch(table_type_raw, 12, struct.pack('<I', 5))

    with pytest.raises(MalformedChunk) as excinfo:
        ResTableType(raw)

    assert excinfo.value.chain == ['chunk_size']

    # even when the offsets would be outside the buffer
    raw = patch(table_type_raw, 12, struct.pack('<I', 0x1000))

    with pytest.raises(MalformedChunk):
        ResTableType(raw)


def test_reject_entries_start_outside_chunk(table_type_raw, patch):
    raw = patch(table_type_raw, 16, struct.pack('<I', 36))

    with pytest.raises(MalformedChunk) as excinfo:
        ResTableType(raw)

    assert excinfo.value.chain == ['entries_start']


def test_reject_wrong_chunk_type(table_type_raw, patch):
    raw = patch(table_type_raw, 0, b'\x02\x02')

    with pytest.raises(WrongChunkType) as excinfo:
        ResTableType(raw)

    assert excinfo.value.expected == ResChunkType.RES_TABLE_TYPE_TYPE
    assert excinfo.value.found == ResChunkType.RES_TABLE_TYPE_SPEC_TYPE
    assert excinfo.value.chain == ['type']


def test_reject_zero_id(table_type_raw, patch):
    with pytest.raises(MalformedChunk) as excinfo:
        ResTableType(patch(table_type_raw, 8, b'\x00'))

    assert excinfo.value.chain == ['id']


def test_truncated_buffer(table_type_raw):
    with pytest.raises(OutOfBounds) as excinfo:
        ResTableType(table_type_raw[:34])

    assert excinfo.value.chain == ['entry_data']


def test_id_encoding():
    chunk = ResTableType.from_parts(0, CONFIG, [None], b'')

    assert chunk.id.value == 1
    assert chunk.pack()[8] == 0x01

    with pytest.raises(ValueError):
        ResTableType.from_parts(0xff, CONFIG, [], b'')


def test_decode_siblings(table_type_raw):
    other = ResTableType.from_parts(3, CONFIG, [0], b'\x01\x02\x03\x04\x05\x06\x07\x08')
    stream = Stream(table_type_raw + other.pack())

    first = ResTableType(stream)
    second = ResTableType(stream)

    assert first.resource_type_id == 0
    assert second.resource_type_id == 3
    assert second.origin == 36
    assert second.entry_data.value.offset == 36 + 28
    assert second == other
    assert stream.tell() == 36 + other.chunk_size.value


def test_reserved_fields(table_type_raw, patch):
    raw = patch(table_type_raw, 9, b'\x01\x34\x12')
    chunk = ResTableType(raw)

    assert chunk.flags.value == ResTableTypeFlags.SPARSE
    assert chunk.reserved.value == 0x1234

    assert chunk.pack() == raw
    assert chunk.pack(preserve_reserved=False) == table_type_raw

    # the chunk itself is not touched
    assert chunk.reserved.value == 0x1234


def test_buffer_too_small(table_type_raw):
    chunk = ResTableType(table_type_raw)
    output = bytearray(40)
    stream = Stream(output)
    stream.seek(5)

    with pytest.raises(BufferTooSmall):
        chunk.put(stream)

    assert output == bytearray(40)
    assert stream.tell() == 5

    stream.seek(4)
    chunk.put(stream)

    assert output[4:] == table_type_raw


def test_encode_length_mismatch(table_type_raw):
    chunk = ResTableType(table_type_raw)
    chunk.chunk_size.value = 40

    with pytest.raises(EncodeLengthMismatch):
        chunk.pack()

    with pytest.raises(AssertionError):
        chunk.pack()


def test_encode_length_mismatch_writes_nothing(table_type_raw):
    chunk = ResTableType(table_type_raw)
    chunk.entry_data.value = ByteRangeView(b'\x00' * 8)
    output = bytearray(36)

    with pytest.raises(EncodeLengthMismatch):
        chunk.put(output)

    assert output == bytearray(36)


def test_encode_leaves_layout_alone(table_type_raw, patch):
    stream = Stream(table_type_raw + patch(table_type_raw, 16, struct.pack('<I', 28)))
    ResTableType(stream)
    chunk = ResTableType(stream)
    layout = chunk.layout

    chunk.pack()

    assert chunk.origin == 36
    assert chunk.layout == layout
    assert chunk.layout['entry_data'] == (28, 4)
    assert chunk.entries_start.value == 28


def test_truncated_header(table_type_raw):
    for length in range(24):
        with pytest.raises(OutOfBounds):
            ResTableType(table_type_raw[:length])


def test_entry_offsets(table_type_raw):
    chunk = ResTableType(table_type_raw)

    assert list(chunk.iter_entry_offsets()) == [None, 0]
    assert chunk.get_entry_offset(0) is None
    assert chunk.get_entry_offset(1) == 0
    assert not chunk.has_entry(0)
    assert chunk.has_entry(1)
    assert chunk.count_present() == 1

    with pytest.raises(IndexError):
        chunk.get_entry_offset(2)
    with pytest.raises(IndexError):
        chunk.get_entry_offset(-1)


def test_from_parts_with_raw_offsets():
    chunk = ResTableType.from_parts(1, CONFIG, ENTRY_OFFSETS, ENTRY_DATA)

    assert chunk.entry_count.value == 2
    assert list(chunk.iter_entry_offsets()) == [None, 0]

    with pytest.raises(ValueError):
        ResTableType.from_parts(1, CONFIG, b'\x00' * 3, b'')

    with pytest.raises(ValueError):
        ResTableType.from_parts(1, CONFIG, [0x100000000], b'')

    with pytest.raises(ValueError):
        ResTableType.from_parts(1, CONFIG, [-4], b'')


def test_copy(table_type_raw):
    data = bytearray(table_type_raw)
    chunk = ResTableType(data)

    copy = chunk.copy()

    assert copy == chunk
    assert copy.entry_data.value.base is not data

    data[32:36] = b'\x00' * 4

    assert chunk.entry_data.value == b'\x00' * 4
    assert copy.entry_data.value == ENTRY_DATA


def test_str(table_type_raw):
    dump = str(ResTableType(table_type_raw))

    assert dump.startswith('RES_TABLE_TYPE_TYPE at 0x0:')
    assert '2 (1 present)' in dump


def test_walk_container(table_type_raw):
    package_header = b'\x00\x02\x08\x00' + struct.pack('<I', 8 + 2 * 36)
    stream = Stream(package_header + table_type_raw * 2)

    header = next(iter_chunks(stream))
    assert header.type.value == ResChunkType.RES_TABLE_PACKAGE_TYPE

    stream.seek(header.origin + header.header_size.value)
    chunks = []
    for child in iter_chunks(stream, header.end):
        chunks.append(ResTableType(stream))

    assert [_.origin for _ in chunks] == [8, 44]
    assert chunks[0] == chunks[1]
