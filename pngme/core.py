"""
Core module for the abstraction of a file format

"""
import logging
from typing import Tuple, List, Dict

from .fields import Field
from .meta import MetaChunk
from .streams import Stream
from .exceptions import UnpackException
from .properties import ChunkPhase


logger = logging.getLogger(__name__)


class Chunk(Field, metaclass=MetaChunk):
    """
    Together with Field is the main class that defines a format: it's a record
    made of the fields declared as class attributes, in order of declaration.

    A Chunk can contain sub-chunks.

    It can be built in two ways

     1. passing a source (bytes, a path or a Stream) that is unpacked
     2. passing the values of the fields as keyword arguments: in this case
        the derived fields (sizes, checksums) are calculated
    """

    def __init__(self, source=None, father=None, name=None, **values):
        super().__init__(name=name, father=father)

        for field_name, value in values.items():
            if field_name not in self._meta.fields:
                raise AttributeError(f"'{self.__class__.__name__}' has no field named '{field_name}'")
            setattr(self, field_name, value)

        if source is not None:
            stream = source if isinstance(source, Stream) else Stream(source)
            logger.debug('unpacking \'%s\' from %r', self.__class__.__name__, stream)
            self.unpack(stream)
        else:
            if values:
                self.update()

            self.relayout()

    def get_ordered_fields_name(self) -> List[str]:
        return self._meta.fields

    def get_fields(self) -> List[Tuple[str, Field]]:
        '''It returns a list of couples (name, instance) for each field.'''
        return [(_, getattr(self, _)) for _ in self.get_ordered_fields_name()]

    def __repr__(self):
        msg = []
        for field_name, field in self.get_fields():
            msg.append('%s=%s' % (field_name, repr(field)))
        return '<%s(%s)>' % (self.__class__.__name__, ','.join(msg))

    def __str__(self):
        msg = ''
        for field_name, field in self.get_fields():
            msg += '%s: %s\n' % (field_name, repr(field))
        return msg

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented

        return self.value == other.value

    def init(self):
        for _, field in self.get_fields():
            field.init()

    def _get_value(self):
        return [field.value for _, field in self.get_fields()]

    def _set_value(self, value):
        raise ValueError(f"'{self.__class__.__name__}' can be set only with another instance of it")

    def _get_size(self):
        '''the size MUST not be set but MUST be derived from the subchunks'''
        size = 0
        for _, field in self.get_fields():
            size += field.size

        return size

    def _get_raw(self) -> bytes:
        return b''.join(field.raw for _, field in self.get_fields())

    @property
    def layout(self) -> Dict[str, Tuple[int, int]]:
        result = {}
        for name, field in self.get_fields():
            result[name] = (field.offset, field.size)

        return result

    def update(self):
        '''Refresh the derived values (sizes, checksums) of all the subfields.'''
        for _, field in self.get_fields():
            field.update()

    def relayout(self, offset=0):
        '''This method triggers the chunk's children to reset the offsets.

        In practice it's like packing() but it's only interested in the sizes
        of the chunks.'''
        phase_old = self._phase
        self._phase = ChunkPhase.RELAYOUTING
        self.offset = offset

        size = 0
        for field_name, field_instance in self.get_fields():
            size += field_instance.relayout(offset=offset + size)

        self._phase = phase_old

        return size

    def pack(self, stream=None, relayout=True):
        '''Encode the record into bytes.

        Only the outermost call refreshes the derived values and the offsets,
        the subchunks are packed at the offsets already calculated.
        '''
        self._phase = ChunkPhase.PACKING

        if relayout:
            self.update()
            self.relayout()

        stream = Stream(b'') if stream is None else stream

        for field_name, field_instance in self.get_fields():
            logger.debug('packing %s.%s at offset %08x', self.__class__.__name__, field_name, field_instance.offset)

            stream.seek(field_instance.offset)
            field_instance.pack(stream=stream, relayout=False)

        self._phase = ChunkPhase.DONE

        return stream.getvalue()

    def unpack(self, stream):
        '''Take binary data and build the representation given by the class.

        Failures keep their kind while propagating: each record appends the name
        of the field that failed to the exception's chain.
        '''
        self._phase = ChunkPhase.UNPACKING
        self.offset = stream.tell()

        for field_name, field in self.get_fields():
            offset = stream.tell()
            logger.debug('unpacking %s.%s at offset %d', self.__class__.__name__, field_name, offset)

            try:
                field.unpack(stream)
            except UnpackException as e:
                e.chain.append(field_name)
                raise

            field.offset = offset

        self._phase = ChunkPhase.DONE
