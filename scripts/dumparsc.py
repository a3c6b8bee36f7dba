#!/usr/bin/env python3
'''
Dump the table type chunks of a compiled resource table.

The argument can be a resources.arsc file or an APK containing one.
'''
import sys
import os
import logging
import zipfile

from restable.exceptions import RestableException
from restable.streams import Stream
from restable.resources import (
    ResChunkType,
    ResTableType,
    CONTAINER_CHUNK_TYPES,
    iter_chunks,
)


logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)
logger = logging.getLogger(__name__)


def usage(progname):
    print('usage: %s <resources.arsc or apk>...' % progname)
    sys.exit(1)


def open_table(path):
    if zipfile.is_zipfile(path):
        logger.debug(f'reading resources.arsc from \'{path}\'')
        with zipfile.ZipFile(path) as apk:
            return Stream(apk.read('resources.arsc'))

    return Stream(path)


def dump_chunks(stream, end, depth=0):
    indent = '  ' * depth
    for header in iter_chunks(stream, end):
        chunk_type = header.type.value
        name = chunk_type.name if isinstance(chunk_type, ResChunkType) else f'0x{chunk_type:04x}'
        print(f'{indent}[{header.origin:08x}, {header.end:08x}) {name}')

        if chunk_type == ResChunkType.RES_TABLE_TYPE_TYPE:
            table_type = ResTableType(stream)
            for line in str(table_type).splitlines()[1:]:
                print(f'{indent}{line}')
        elif chunk_type in CONTAINER_CHUNK_TYPES:
            stream.seek(header.origin + header.header_size.value)
            dump_chunks(stream, header.end, depth=depth + 1)


if __name__ == '__main__':
    if len(sys.argv) < 2:
        usage(sys.argv[0])

    failed = False

    for path in sys.argv[1:]:
        print(f'{path}:')
        try:
            stream = open_table(path)
            dump_chunks(stream, len(stream))
        except (RestableException, OSError, KeyError) as e:
            logger.error(f'failed to dump \'{path}\': {e}')
            failed = True

    sys.exit(1 if failed else 0)
