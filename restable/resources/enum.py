from enum import Enum, Flag


class ResChunkType(Enum):
    '''The 16 bits tag at the start of each chunk of a compiled resource table
    (see ResourceTypes.h in the Android framework).'''
    RES_NULL_TYPE           = 0x0000
    RES_STRING_POOL_TYPE    = 0x0001
    RES_TABLE_TYPE          = 0x0002
    RES_XML_TYPE            = 0x0003

    # chunk types in RES_XML_TYPE
    RES_XML_FIRST_CHUNK_TYPE     = 0x0100
    RES_XML_START_NAMESPACE_TYPE = 0x0100
    RES_XML_END_NAMESPACE_TYPE   = 0x0101
    RES_XML_START_ELEMENT_TYPE   = 0x0102
    RES_XML_END_ELEMENT_TYPE     = 0x0103
    RES_XML_CDATA_TYPE           = 0x0104
    RES_XML_LAST_CHUNK_TYPE      = 0x017f
    RES_XML_RESOURCE_MAP_TYPE    = 0x0180

    # chunk types in RES_TABLE_TYPE
    RES_TABLE_PACKAGE_TYPE            = 0x0200
    RES_TABLE_TYPE_TYPE               = 0x0201
    RES_TABLE_TYPE_SPEC_TYPE          = 0x0202
    RES_TABLE_LIBRARY_TYPE            = 0x0203
    RES_TABLE_OVERLAYABLE_TYPE        = 0x0204
    RES_TABLE_OVERLAYABLE_POLICY_TYPE = 0x0205
    RES_TABLE_STAGED_ALIAS_TYPE       = 0x0206


# chunks containing other chunks after their header
CONTAINER_CHUNK_TYPES = (
    ResChunkType.RES_TABLE_TYPE,
    ResChunkType.RES_TABLE_PACKAGE_TYPE,
    ResChunkType.RES_XML_TYPE,
)


class ResTableTypeFlags(Flag):
    '''Older producers write this byte as padding, newer ones as flags.'''
    NONE     = 0
    SPARSE   = 1 << 0
    OFFSET16 = 1 << 1
