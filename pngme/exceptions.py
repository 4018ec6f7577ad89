class PngmeException(Exception):
    '''Base class to extend in order to throw exception in pngme.

    It takes a message and the chain of the layers that caused the exception:
    each record the exception crosses while propagating appends the name of
    its field, so the chain is ordered from the innermost to the outermost.
    '''

    def __init__(self, message=None, chain=None):
        self.message = message or ''
        self.chain = chain if chain is not None else []
        super().__init__(self.message)

    @property
    def path(self):
        '''Dotted path of the field that failed, starting from the outermost record.'''
        return '.'.join(reversed(self.chain))

    def __str__(self):
        if not self.chain:
            return self.message

        return f'{self.message} (at {self.path})'


class UnpackException(PngmeException):
    pass


class MagicException(UnpackException):
    '''The data doesn't start with the expected magic bytes.'''
    pass


class InvalidTagException(UnpackException):
    pass


class InsufficientBytesException(UnpackException):
    pass


class LengthMismatchException(UnpackException):
    '''The declared length doesn't agree with the bytes actually available.'''
    pass


class CRCMismatchException(UnpackException):
    '''Corruption or tampering: the stored CRC is not the one calculated.'''

    def __init__(self, expected, actual, chain=None):
        self.expected = expected
        self.actual = actual
        super().__init__(f'crc mismatch: stored 0x{actual:08x}, calculated 0x{expected:08x}', chain=chain)


class ChunkNotFoundException(PngmeException):

    def __init__(self, chunk_type, chain=None):
        self.chunk_type = chunk_type
        super().__init__(f'no chunk with type {chunk_type!r}', chain=chain)


class PayloadDecodeException(PngmeException):
    pass
