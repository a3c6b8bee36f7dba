'''
# Android compiled resources

The resources of an Android application are compiled into a table (the
resources.arsc file at the root of an APK) made of nested chunks, each one
starting with a generic header describing its type and its size.

Reference to <https://android.googlesource.com/platform/frameworks/base/+/master/libs/androidfw/include/androidfw/ResourceTypes.h>.

Only the table type chunk is fully decoded, the other chunks are walked
through their generic header.
'''
from .enum import ResChunkType, ResTableTypeFlags, CONTAINER_CHUNK_TYPES
from .chunk import (
    ResChunkHeader,
    ResChunk,
    read_header,
    write_header,
    peek_chunk_type,
    iter_chunks,
)
from .table_type import ResTableType, CONFIG_OFFSET
