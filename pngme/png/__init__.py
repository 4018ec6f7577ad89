'''
# Portable Network Graphics

A PNG file is an 8-byte signature followed by a sequence of chunks; here we
are interested only in the structure, each chunk is treated as an opaque
payload identified by its type, so that it's possible to hide messages in a
file by adding chunks to it and to get them back.

The specification is at <http://www.libpng.org/pub/png/spec/1.2/PNG-Contents.html>.

'''
import logging

from ..core import Chunk
from .. import fields
from ..meta import Endianess
from ..streams import Stream
from ..properties import Dependency
from ..common import crc
from ..exceptions import (
    InsufficientBytesException,
    LengthMismatchException,
    ChunkNotFoundException,
    PayloadDecodeException,
)
from .tag import ChunkTag, TagField
from .utils import get_chunk_by_name, index_of_chunk


logger = logging.getLogger(__name__)

SIGNATURE = b'\x89\x50\x4e\x47\x0d\x0a\x1a\x0a'


class PNGHeader(Chunk):
    magic = fields.StringField(8, default=SIGNATURE, is_magic=True)


class PNGChunk(Chunk):
    '''This is the main data structure of the format: the 4 fields represent
    a chunk into the file. Each field is intended big-endian.

    The length counts only the bytes of the data field and it's never set
    directly: it follows the data.

    The crc field is network-byte-order CRC-32 computed over the chunk type and chunk data, but not the length.

    # Critical chunks

     1. IHDR: contains image's width, height, bit depth, color type, compression method, filter method and interlace method
     2. PLTE: contains the palette data
     3. IDAT: contains the actual image data (compressed)
     4. IEND: is the terminator chunk
    '''
    length = fields.StructField('I', endianess=Endianess.BIG_ENDIAN)
    type   = TagField()
    data   = fields.StringField(Dependency('.length'))
    crc    = crc.CRCField(['type', 'data'], endianess=Endianess.BIG_ENDIAN)  # network byte order

    # length, type and crc
    OVERHEAD = 12

    def __init__(self, source=None, father=None, name=None, **values):
        # a source on its own must contain exactly one chunk, a Stream
        # is shared with the following chunks of the file
        if source is not None and not isinstance(source, Stream):
            source = self.check_slice(Stream(source))

        super().__init__(source, father=father, name=name, **values)

    @classmethod
    def check_slice(cls, stream: Stream) -> Stream:
        available = stream.remaining()

        if available < cls.OVERHEAD:
            raise InsufficientBytesException(
                f'a chunk needs at least {cls.OVERHEAD} bytes, found {available}')

        length = cls.length._unpack(stream.peek(4))
        if available != cls.OVERHEAD + length:
            raise LengthMismatchException(
                f'a chunk with length {length} needs {cls.OVERHEAD + length} bytes, found {available}')

        return stream

    @classmethod
    def new(cls, tag, payload: bytes) -> "PNGChunk":
        return cls(type=tag, data=payload)

    @classmethod
    def from_bytes(cls, data: bytes) -> "PNGChunk":
        '''Unpack a chunk from a slice that must contain it exactly, with no trailing bytes.'''
        return cls(bytes(data))

    def unpack(self, stream):
        available = stream.remaining()

        if available < self.OVERHEAD:
            raise InsufficientBytesException(
                f'a chunk needs at least {self.OVERHEAD} bytes, only {available} left')

        length = self.length._unpack(stream.peek(4))
        if available < self.OVERHEAD + length:
            raise LengthMismatchException(
                f'a chunk with length {length} needs {self.OVERHEAD + length} bytes, only {available} left')

        super().unpack(stream)

    @property
    def tag(self) -> ChunkTag:
        return self.type.value

    @property
    def payload(self) -> bytes:
        return self.data.value

    @property
    def checksum(self) -> int:
        return self.crc.value

    def isCritical(self):
        return self.tag.is_critical()

    def payload_as_text(self, encoding='utf-8') -> str:
        try:
            return self.payload.decode(encoding)
        except UnicodeDecodeError as e:
            raise PayloadDecodeException(f'the payload of \'{self.tag}\' is not {encoding} text: {e}') from e


class PNGFile(Chunk):
    '''The whole file: the signature and the chunks in the order they appear.

    The order of the chunks is not checked, it's up to the caller to put a
    chunk where a PNG reader expects it.'''
    header = PNGHeader()
    chunks = fields.ArrayField(PNGChunk())

    @classmethod
    def from_bytes(cls, data: bytes) -> "PNGFile":
        return cls(bytes(data))

    @property
    def signature(self) -> bytes:
        return self.header.magic.value

    def append_chunk(self, chunk: PNGChunk):
        logger.debug('appending chunk \'%s\' with length %d', chunk.tag, chunk.length.value)
        self.chunks.append(chunk)

    def append(self, tag, payload: bytes) -> PNGChunk:
        chunk = PNGChunk.new(tag, payload)
        self.append_chunk(chunk)

        return chunk

    def chunk_by_type(self, chunk_type: str):
        '''Return the first chunk with the given type or None.'''
        return get_chunk_by_name(self.chunks, chunk_type)

    def remove_chunk(self, chunk_type: str) -> PNGChunk:
        '''Remove the first chunk with the given type, the following ones
        with the same type are left in place.'''
        idx = index_of_chunk(self.chunks, chunk_type)

        if idx is None:
            raise ChunkNotFoundException(chunk_type)

        chunk = self.chunks[idx]
        del self.chunks[idx]
        chunk.father = None

        logger.debug('removed chunk \'%s\' at position %d', chunk_type, idx)

        return chunk
