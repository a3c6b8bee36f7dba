class RestableException(Exception):
    '''Base class to extend in order to throw exception in restable.

    Besides the message it carries the chain of the fields that the exception
    traversed while bubbling up, innermost first.
    '''

    def __init__(self, msg='', chain=None):
        self.chain = chain if chain is not None else []
        super().__init__(msg)

    def __str__(self):
        msg = super().__str__()
        if not self.chain:
            return msg

        return '%s: %s' % ('.'.join(reversed(self.chain)), msg)


class UnpackException(RestableException):
    pass


class MagicException(UnpackException):
    pass


class WrongChunkType(MagicException):
    '''The header tag doesn't match the chunk we are trying to decode.'''

    def __init__(self, expected, found, chain=None):
        self.expected = expected
        self.found = found
        super().__init__(f'expected chunk type {expected!r}, found {found!r}', chain=chain)


class MalformedChunk(UnpackException):
    '''The sizes and offsets declared by a chunk are not consistent.'''
    pass


class OutOfBounds(RestableException, IndexError):
    pass


class PackException(RestableException):
    pass


class BufferTooSmall(PackException):
    pass


class UnrecoverableException(RestableException):
    '''This is useful when is not possible to let an unknown value
    slip through the parsing.'''
    pass


class EncodeLengthMismatch(UnrecoverableException, AssertionError):
    '''The encoder wrote a number of bytes different from the declared chunk size:
    this is a bug, not a problem with the data.'''
    pass
