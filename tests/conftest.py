import pytest


CONFIG = b'\x04\x00\x00\x00'
ENTRY_OFFSETS = b'\xff\xff\xff\xff' + b'\x00\x00\x00\x00'
ENTRY_DATA = b'\xde\xad\xbe\xef'


@pytest.fixture
def table_type_raw():
    '''A table type chunk with two entries, only the second one with a value,
    and a configuration made only of its own size.'''
    return (
        b'\x01\x02'          # RES_TABLE_TYPE_TYPE
        b'\x18\x00'          # header size
        b'\x24\x00\x00\x00'  # chunk size
        b'\x01'              # id
        b'\x00'              # flags
        b'\x00\x00'          # reserved
        b'\x02\x00\x00\x00'  # entry count
        b'\x20\x00\x00\x00'  # entries start
        + CONFIG
        + ENTRY_OFFSETS
        + ENTRY_DATA
    )


@pytest.fixture
def patch():
    '''Return a copy of data with some bytes replaced at offset.'''
    def _patch(data: bytes, offset: int, replacement: bytes) -> bytes:
        return data[:offset] + replacement + data[offset + len(replacement):]

    return _patch
