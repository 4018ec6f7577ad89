'''
# Chunk types

A chunk type is a 4-byte code made of ASCII letters, uppercase (65-90) or
lowercase (97-122). The case of each letter, i.e. bit 5 (value 32) of each byte,
encodes a property of the chunk:

 1. ancillary bit (first byte): uppercase means critical
 2. private bit (second byte): uppercase means public
 3. reserved bit (third byte): must be uppercase in a conforming file
 4. safe-to-copy bit (fourth byte): lowercase means safe to copy

See <http://www.libpng.org/pub/png/spec/1.2/PNG-Structures.html#Chunk-naming-conventions>.
'''
import logging

from bitstring import Bits

from ..fields import Field
from ..exceptions import InvalidTagException


logger = logging.getLogger(__name__)

TAG_SIZE = 4
# position of bit 5 inside a byte, counting from the most significant bit
_PROPERTY_BIT = 2


def is_ascii_letter(byte):
    return 65 <= byte <= 90 or 97 <= byte <= 122


class ChunkTag(object):
    '''Immutable 4-byte identifier of a chunk.

    The construction only checks that the bytes are letters, a tag with the
    reserved bit set is still a tag but is_valid() returns False for it.'''

    def __init__(self, raw):
        raw = bytes(raw)

        if len(raw) != TAG_SIZE:
            raise InvalidTagException(f'a chunk type must be {TAG_SIZE} bytes, not {len(raw)}')

        if not all(is_ascii_letter(_) for _ in raw):
            raise InvalidTagException(f'invalid tag bytes {raw!r}: only ASCII letters are allowed')

        self._raw = raw

    @classmethod
    def from_str(cls, text: str) -> "ChunkTag":
        raw = text.encode('utf-8')

        if len(raw) != TAG_SIZE:
            raise InvalidTagException(f'{text!r} is not {TAG_SIZE} bytes long')

        return cls(raw)

    @classmethod
    def coerce(cls, value) -> "ChunkTag":
        '''Build a tag from whatever makes sense as a tag.'''
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_str(value)

        return cls(value)

    @property
    def raw(self) -> bytes:
        return self._raw

    def __str__(self):
        return self._raw.decode('ascii')

    def __repr__(self):
        return f'<{self.__class__.__name__}({self})>'

    def __eq__(self, other):
        if not isinstance(other, ChunkTag):
            return NotImplemented

        return self._raw == other._raw

    def __hash__(self):
        return hash(self._raw)

    def _property_bit(self, idx) -> bool:
        return Bits(self._raw)[idx * 8 + _PROPERTY_BIT]

    def is_critical(self) -> bool:
        return not self._property_bit(0)

    def is_public(self) -> bool:
        return not self._property_bit(1)

    def is_reserved_bit_valid(self) -> bool:
        return not self._property_bit(2)

    def is_safe_to_copy(self) -> bool:
        return self._property_bit(3)

    def is_valid(self) -> bool:
        return all(is_ascii_letter(_) for _ in self._raw) and self.is_reserved_bit_valid()


class TagField(Field):
    '''Field containing a ChunkTag, it accepts also strings and bytes when set.'''

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value})>'

    def _set_value(self, value):
        self._value = None if value is None else ChunkTag.coerce(value)

    def _get_size(self):
        return TAG_SIZE

    def _get_raw(self) -> bytes:
        if self.value is None:
            raise ValueError(f'no chunk type set for \'{self.name}\'')

        return self.value.raw

    def unpack(self, stream):
        tag = ChunkTag(self._read(stream, TAG_SIZE))

        if not tag.is_reserved_bit_valid():
            logger.warning('chunk type \'%s\' has the reserved bit set', tag)

        self.value = tag
