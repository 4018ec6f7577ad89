import pytest

from pngme.core import Chunk
from pngme.exceptions import UnpackException
from pngme.fields import StructField, StringField
from pngme.meta import Meta
from pngme.properties import Dependency


def test_meta():
    class Dummy(Chunk):
        field = StructField('i')

    class Dummy2(Chunk):
        field2 = StructField('i')

    d = Dummy()
    d2 = Dummy2()

    assert isinstance(d._meta, Meta)
    assert d._meta.fields == ['field']
    assert isinstance(d.field, StructField)
    assert d2._meta.fields == ['field2']


def test_chunk():
    """Check that building a Chunk from fields behaves correctly."""
    class Dummy(Chunk):
        a = StructField('I', default=0xbad)
        b = StringField(0x10)
        c = StructField('I', default=0xdeadbeef)

    dummy = Dummy()

    assert dummy.a.size == 4
    assert dummy.a.raw == b'\xad\x0b\x00\x00'
    assert dummy.a.value == 0xbad
    assert dummy.a.offset == 0x00
    assert dummy.a.father is dummy

    assert dummy.b.size == 0x10
    assert dummy.b.raw == b'\x00' * 0x10
    assert dummy.b.offset == 0x04

    assert dummy.c.size == 0x4
    assert dummy.c.raw == b'\xef\xbe\xad\xde'
    assert dummy.c.offset == 0x14

    assert dummy.size == 0x18
    assert dummy.layout == {
        'a': (0x00, 0x04),
        'b': (0x04, 0x10),
        'c': (0x14, 0x04),
    }
    assert dummy.pack() == (
        b'\xad\x0b\x00\x00' +
        b'\x00' * 0x10 +
        b'\xef\xbe\xad\xde'
    )


def test_instances_do_not_share_fields():
    class Dummy(Chunk):
        a = StructField('I')

    first = Dummy()
    second = Dummy()

    first.a.value = 1

    assert first.a is not second.a
    assert second.a.value == 0


def test_chunk_from_values():
    class Dummy(Chunk):
        a = StructField('H')
        b = StringField(2)

    dummy = Dummy(a=0x0102, b=b'xy')

    assert dummy.pack() == b'\x02\x01xy'

    with pytest.raises(AttributeError):
        Dummy(c=1)


def test_chunk_w_dependencies():
    class Example(Chunk):
        sz = StructField('I')
        data = StringField(Dependency('.sz'), default=b'kebab')

    example = Example()

    assert list(example.data.get_dependencies().keys()) == ['length']

    assert example.sz.father is example
    assert example.sz.value == 5
    assert example.data.value == b'kebab'


def test_inheritance():
    '''subclasses inherit fields'''
    class Father(Chunk):
        field_a = StringField(0x10)
        field_b = StructField("I")

    class Son(Father):
        field_c = StringField(0x08)

    field_b_value = b'\x01\x02\x03\x04'
    field_c_value = b'ABCDEFGH'
    son = Son(b'A' * 16 + field_b_value + field_c_value)

    assert [name for name, _ in son.get_fields()] == [
        'field_a', 'field_b', 'field_c',
    ]

    assert son.field_b.value == 0x04030201
    assert son.field_c.value == field_c_value


def test_offset_dependencies():
    class TLV(Chunk):
        type   = StructField('B')
        length = StructField('I')
        data   = StringField(Dependency('.length'))
        extra  = StructField('I')

    tlv = TLV((
        b'\x01'
        b'\x0f\x00\x00\x00'
        b'\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41\x41'
        b'\x0a\x0b\x0c\x0d'
    ))

    assert tlv.type.value == 0x01
    assert tlv.type.offset == 0x00
    assert tlv.length.value == 0x0f
    assert tlv.length.offset == 0x01
    assert tlv.data.value == b'\x41' * 0x0f
    assert tlv.data.offset == 0x01 + 0x04
    assert tlv.extra.value == 0x0d0c0b0a
    assert tlv.extra.offset == 0x01 + 0x04 + 0x0f

    # changing the data moves the following field and updates the length
    tlv.data.value = b'\x42\x42\x42'
    raw = tlv.pack()

    assert tlv.length.value == 0x03
    assert tlv.extra.offset == 0x01 + 0x04 + 0x03
    assert raw == b'\x01\x03\x00\x00\x00BBB\x0a\x0b\x0c\x0d'


def test_nested_chunks():
    class Dummy(Chunk):
        a = StructField('I')
        b = StructField('H')

    class Father(Chunk):
        dummy = Dummy()
        c     = StringField(0x10)

    father = Father()

    assert father.dummy.father is father
    assert father.layout == {
        'dummy': (0, 6),
        'c': (6, 0x10),
    }
    assert father.dummy.b.offset == 4


def test_unpack_failure_keeps_track_of_the_fields():
    class Inner(Chunk):
        a = StructField('I')

    class Outer(Chunk):
        inner = Inner()
        tail = StructField('H')

    with pytest.raises(UnpackException) as exc:
        Outer(b'\x01\x02')

    assert exc.value.chain == ['a', 'inner']
    assert exc.value.path == 'inner.a'
    assert 'inner.a' in str(exc.value)


def test_equality():
    class Dummy(Chunk):
        a = StructField('I')
        b = StringField(2)

    assert Dummy(b'\x01\x00\x00\x00ab') == Dummy(a=1, b=b'ab')
    assert Dummy(b'\x01\x00\x00\x00ab') != Dummy(a=1, b=b'ac')
