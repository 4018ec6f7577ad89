import zlib

import pytest

from pngme.common.crc import CRCField
from pngme.core import Chunk
from pngme.exceptions import UnpackException, MagicException, CRCMismatchException
from pngme.fields import StructField, StringField, ArrayField
from pngme.meta import Endianess
from pngme.streams import Stream


def test_structfield_conversion_raw_value():
    """Check that the attributes "value" and "raw" are the analogous
    of the integers and bytes representation for a field."""
    field = StructField('I')

    assert field.size == 4
    assert field.raw == b'\x00\x00\x00\x00'
    assert field.value == 0

    field.value = 0xcafe

    assert field.value == 0xcafe
    assert field.raw == b'\xfe\xca\x00\x00'


def test_structfield_big_endian():
    field = StructField('I', endianess=Endianess.BIG_ENDIAN)

    field.unpack(Stream(b'\x00\x00\x00\x2a'))

    assert field.value == 42
    assert field.raw == b'\x00\x00\x00\x2a'


def test_structfield_short_read():
    field = StructField('I')

    with pytest.raises(UnpackException):
        field.unpack(Stream(b'\x01\x02'))


def test_stringfield():
    field = StringField(0x10)

    assert field.size == 0x10
    assert len(field.raw) == field.size
    assert field.raw == b'\x00' * field.size

    with pytest.raises(ValueError):
        field.value = b'kebab'

    data = b''.join([bytes([_]) for _ in range(0x10)])

    field.value = data

    assert field.value == data
    assert field.raw == data


def test_stringfield_magic():
    field = StringField(4, default=b'MAGC', is_magic=True)

    field.unpack(Stream(b'MAGC'))
    assert field.value == b'MAGC'

    with pytest.raises(MagicException):
        field.unpack(Stream(b'MAGX'))

    with pytest.raises(MagicException):
        field.unpack(Stream(b'MA'))


class Item(Chunk):
    v = StructField('H')


def test_arrayfield():
    array = ArrayField(Item())

    assert isinstance(array.value, list)
    assert len(array) == 0

    array.unpack(Stream(b'\x01\x00\x02\x00\x03\x00'))

    assert len(array) == 3
    assert [_.v.value for _ in array] == [1, 2, 3]
    assert array[0] is not array[1]
    assert array[2].offset == 4

    del array[1]
    assert array.relayout() == 4
    assert [_.offset for _ in array] == [0, 2]

    array.append(Item(v=7))
    assert array[2].father is array
    assert array.pack().getvalue() == b'\x01\x00\x03\x00\x07\x00'

    array.clear()

    assert len(array) == 0


def test_arrayfield_failure_reports_the_element():
    array = ArrayField(Item())

    with pytest.raises(UnpackException) as exc:
        array.unpack(Stream(b'\x01\x00\x02'))

    assert exc.value.chain == ['v', '1']


class Record(Chunk):
    payload = StringField(4)
    crc = CRCField(['payload'], endianess=Endianess.BIG_ENDIAN)


def test_crcfield():
    record = Record(payload=b'IEND')

    assert record.crc.value == zlib.crc32(b'IEND') == 0xae426082
    assert record.crc.calculate() == record.crc.value
    assert str(record.crc) == 'ae426082'
    assert record.pack() == b'IEND\xae\x42\x60\x82'


def test_crcfield_unpack():
    record = Record(b'IEND\xae\x42\x60\x82')

    assert record.payload.value == b'IEND'

    with pytest.raises(CRCMismatchException) as exc:
        Record(b'IEND\x00\x00\x00\x00')

    assert exc.value.path == 'crc'
    assert exc.value.actual == 0
    assert exc.value.expected == 0xae426082
