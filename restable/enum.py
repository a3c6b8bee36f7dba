from enum import Flag


class Compliant(Flag):
    '''How strictly the decoded data must follow the format.

    With ENUM an integer without a member in the field's enumeration is an error,
    otherwise it is kept as it is and logged. With MAGIC a field marked as magic
    must hold its default. INHERIT defers the decision to the father chunk.
    '''
    NONE    = 0
    ENUM    = 1 << 0
    MAGIC   = 1 << 1
    INHERIT = 1 << 2
