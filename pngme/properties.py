import logging
from enum import Enum, auto
from typing import List


logger = logging.getLogger(__name__)


class ChunkPhase(Enum):
    '''Enum to state the actual phase of a chunk'''
    INIT      = 0
    RELAYOUTING = auto()
    PACKING   = auto()
    UNPACKING = auto()
    DONE      = auto()


def get_root_from_chunk(instance):
    while instance.father is not None:
        instance = instance.father

    return instance


class Dependency:
    '''This makes the relation between fields possible.

    The relation is defined in one direction (usually for unpacking) and
    is reversed during the packing phase, i.e. you can write something like

        class Simple(Chunk):
            length = fields.StructField('I')
            data = fields.StringField(Dependency('.length'))

    and have the length of the string contained in the field named 'data'
    strictly connected to the field named 'length': reading the data uses
    the value of length, setting the data writes back its size into length.

    The expression is resolved like a module path

     - '.' as first char indicates we refer to a field at the same level
     - otherwise the first component is looked up starting from the root
    '''
    def __init__(self, expression):
        self.expression = expression

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, instance):
        logger.debug('trying to resolve \'%s\' for \'%s\'', self.expression, instance.__class__.__name__)

        # '.length'.split(".") -> ['', 'length']
        # 'length'.split(".") -> ['length']
        fields_path: List[str] = self.expression.split('.')

        if fields_path[0] == '':  # we have a relative dependency
            field = instance.father
            fields_path = fields_path[1:]
        else:
            field = get_root_from_chunk(instance)

        for component_name in fields_path:
            field = getattr(field, component_name)

        logger.debug(' resolved as field %s', field.__class__.__name__)

        return field

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        return self.resolve_field(instance).value

    def resolve_and_set(self, instance, value):
        real_field = self.resolve_field(instance)
        if not hasattr(real_field, 'value'):
            raise ValueError(f'{self!r} does not resolve to a field with a value')

        real_field.value = value


class PropertyDescriptor(object):
    """This the glue for dependency management: the attribute can be a plain
    value of the given type or a Dependency. When there is no father to resolve
    against, the value is cached in the instance itself."""

    def __init__(self, name: str, _type: type):
        self.name = name
        self.type = _type

    @property
    def cache_name(self):
        return f'_{self.name}_cache'

    def __get__(self, instance, owner):
        if instance is None:
            return self

        data = instance.__dict__
        if self.name not in data:
            raise AttributeError(f"no '{self.name}' here!")

        value = data[self.name]

        if isinstance(value, Dependency):
            if getattr(instance, 'father', None) is None:
                return data.get(self.cache_name)

            return value.resolve(instance)

        return value

    def __set__(self, instance, value):
        if not isinstance(value, (self.type, Dependency)):
            raise ValueError(f"A property must be of type {self.type} or a Dependency")

        data = instance.__dict__

        # the first time or when it's a plain value we add without thinking much
        if self.name not in data or not isinstance(data[self.name], Dependency):
            data[self.name] = value
            return

        if isinstance(value, Dependency):
            data[self.name] = value
            return

        if getattr(instance, 'father', None) is None:
            data[self.cache_name] = value
            return

        data[self.name].resolve_and_set(instance, value)
