"""
A Field is "fundamental" datatype from the format point of view, something directly
packable/unpackable without need for relayouting.
"""
import logging
import struct
from typing import Dict

from .meta import FieldBase, Endianess
from .properties import Dependency, ChunkPhase, PropertyDescriptor
from .streams import Stream
from .exceptions import UnpackException, MagicException


logger = logging.getLogger(__name__)


class Field(FieldBase):
    """Base class to subclass from"""

    def __init__(self, *, name=None, father=None, default=None, offset=None,
                 endianess=Endianess.LITTLE_ENDIAN, is_magic=False):
        super().__init__()
        self._phase = ChunkPhase.INIT
        self.name = name
        self.father = father
        self.default = default
        self.offset = offset
        self.endianess = endianess
        self.is_magic = is_magic

        self.init()

    def init(self):
        self.value = self.value_from_default()

    def value_from_default(self):
        return self.default

    def __str__(self):
        return str(self.value)

    def get_dependencies(self) -> Dict[str, Dependency]:
        """Return the dictionary containing as key the attribute that is a Dependency"""
        return {_k: _v for _k, _v in self.__dict__.items() if isinstance(_v, Dependency)}

    def _get_value(self):
        return self._value

    def _set_value(self, value) -> None:
        self._value = value

    value = property(
        fget=lambda self: self._get_value(),
        fset=lambda self, value: self._set_value(value))

    def _get_size(self):
        raise NotImplementedError(f"method {self.__class__.__name__}._get_size() not implemented")

    size = property(
        fget=lambda self: self._get_size(),
    )

    def _get_raw(self) -> bytes:
        raise NotImplementedError(f"method {self.__class__.__name__}._get_raw() not implemented")

    raw = property(
        fget=lambda self: self._get_raw(),
    )

    def relayout(self, offset=0):
        self.offset = offset

        return self.size

    def _update_value(self):
        '''This is used to update the binary value before packing'''
        pass

    def update(self):
        self._update_value()

    def pack(self, stream=None, relayout=True):
        '''Write the raw representation into the stream at the actual position.

        This operation is not idempotent: derived values are refreshed first
        when relayout is requested.'''
        if relayout:
            self.update()
            self.relayout()

        stream = Stream(b'') if stream is None else stream
        stream.write(self.raw)

        return stream

    def unpack(self, stream):
        raise NotImplementedError('you need to implement this in the subclass')

    def _read(self, stream, n) -> bytes:
        raw = stream.read(n)

        if len(raw) != n:
            raise UnpackException(f'expected {n} bytes for {self.__class__.__name__}, found {len(raw)}')

        return raw


class StructField(Field):
    """
    Simplest of the fields: mimic the behaviour of the struct module packing/unpacking
    integers to/from bytes.
    """

    def __init__(self, format, default=0, formatter=None, **kw):
        self.format = format
        self.formatter = formatter
        super().__init__(default=default, **kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, str(self) if self.formatter else hex(self.value))

    def __str__(self):
        if self.formatter:
            return self.formatter % self.value

        return str(self.value)

    def get_format(self):
        return '%s%s' % ('<' if self.endianess == Endianess.LITTLE_ENDIAN else '>', self.format)

    def _get_size(self):
        return struct.calcsize(self.get_format())

    def _get_raw(self) -> bytes:
        return struct.pack(self.get_format(), self.value)

    def _unpack(self, raw: bytes) -> int:
        try:
            return struct.unpack(self.get_format(), raw)[0]
        except struct.error as e:
            raise UnpackException(str(e)) from e

    def unpack(self, stream):
        self.value = self._unpack(stream.read(self.size))


class StringField(Field):
    """Represent a contiguous chunk of bytes.

    The length can be fixed or a Dependency: in the latter case setting the
    value writes its size back into the field the dependency points to."""

    length = PropertyDescriptor('length', int)

    def __init__(self, n=None, **kw):
        if n is None and kw.get('default') is None:
            raise ValueError("StringField must have 'n' or 'default' indicated!")

        self.father = None
        self.length = n if n is not None else len(kw['default'])

        super().__init__(**kw)

    def __repr__(self):
        return '<%s(%s)>' % (self.__class__.__name__, repr(self.value))

    def __len__(self):
        return len(self.value)

    def has_fixed_length(self):
        return 'length' not in self.get_dependencies()

    def value_from_default(self):
        if self.default is not None:
            return self.default

        return b'\x00' * (self.length or 0)

    def _get_size(self):
        return len(self.value)

    def _set_value(self, value) -> None:
        value = bytes(value)
        if self.has_fixed_length() and len(value) != self.length:
            raise ValueError(f'you are trying to set a value with the wrong size (that is {self.length} bytes)')

        self._value = value
        self.length = len(value)

    def _get_raw(self):
        return self.value

    def _update_value(self):
        self.length = len(self.value)

    def unpack(self, stream):
        n = self.length
        raw = stream.read(n)

        if self.is_magic and raw != self.default:
            raise MagicException(f'magic mismatch: expected {self.default!r}, found {raw!r}')

        if len(raw) != n:
            raise UnpackException(f'expected {n} bytes, found {len(raw)}')

        self.value = raw


class ArrayField(Field):
    '''Un/Pack an array of Chunks.

    The elements are unpacked one after the other until the stream is exhausted;
    this class behaves like a list in python for what concerns access,
    iteration, append and deletion.
    '''

    def __init__(self, field_cls, **kw):
        self.field_cls = field_cls
        kw.setdefault('default', [])

        super().__init__(**kw)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.value!r})>'

    def __getitem__(self, item):
        return self.value[item]

    def __delitem__(self, item):
        del self.value[item]

    def __iter__(self):
        return iter(self.value)

    def __len__(self):
        return len(self.value)

    def value_from_default(self):
        return list(self.default)

    def clear(self):
        self.value.clear()

    def _get_raw(self):
        return b''.join(element.raw for element in self.value)

    def _get_size(self):
        size = 0
        for element in self.value:
            size += element.size

        return size

    def relayout(self, offset=0):
        self.offset = offset
        size = 0
        for element in self.value:
            size += element.relayout(offset=offset + size)

        return size

    def update(self):
        for element in self.value:
            element.update()

    def pack(self, stream=None, relayout=True):
        if relayout:
            self.update()
            self.relayout()

        stream = Stream(b'') if stream is None else stream

        for element in self.value:
            stream.seek(element.offset)
            element.pack(stream=stream, relayout=False)

        return stream

    def instance_element(self):
        return self.field_cls.create(father=self)  # pass the father so that we don't lose the hierarchy

    def unpack(self, stream):
        self._phase = ChunkPhase.UNPACKING
        self.value = []

        while not stream.is_exhausted():
            idx = len(self.value)
            element = self.instance_element()
            offset = stream.tell()

            logger.debug('unpacking element #%d of %s at offset %d', idx, self.name, offset)

            try:
                element.unpack(stream)
            except UnpackException as e:
                e.chain.append(str(idx))
                raise

            element.offset = offset
            self.value.append(element)

        self._phase = ChunkPhase.DONE

    def append(self, element):
        element.father = self
        self.value.append(element)
