import inspect
import logging


def get_root_from_chunk(instance):
    while instance.father is not None:
        instance = instance.father

    return instance


class Dependency:
    '''This makes the relation between fields possible.

    In practice this class allows to write something like

        class Simple(Chunk):
            length = fields.StructField('I')
            data = fields.ViewField(Dependency('.length'))

    and have the length of the view contained in the field named 'data'
    read from the field named 'length' at the moment of the unpacking.

    The expression is resolved like a module path: a leading '.' means that
    the first component is a sibling (i.e. it is looked up in the father),
    otherwise the lookup starts from the root chunk. The last component can
    be a field, in which case its value is used, or a method of the chunk,
    in which case it's called without arguments.
    '''
    def __init__(self, expression: str):
        self.expression = expression
        self.logger = logging.getLogger(__name__)

    def __repr__(self):
        return f'<{self.__class__.__name__}({self.expression})>'

    def resolve_field(self, instance):
        fields_path = self.expression.split('.')
        # '.miao'.split(".") -> ['', 'miao']
        # 'miao'.split(".") -> ['miao']

        if fields_path[0] == '':
            field = instance.father
            fields_path = fields_path[1:]
            self.logger.debug(' resolve from father: \'%s\'' % field.__class__.__name__)
        else:
            field = get_root_from_chunk(instance)
            self.logger.debug(' resolve from root: \'%s\'' % field.__class__.__name__)

        if field is None:
            raise AttributeError(f'cannot resolve {self.expression!r} for a field without father')

        for component_name in fields_path:
            field = getattr(field, component_name)

        return field

    def resolve(self, instance):
        '''With this method we resolve the attribute with respect to the instance
        passed as argument.'''
        field = self.resolve_field(instance)

        value = field() if inspect.ismethod(field) else field.value

        self.logger.debug(' %r resolved with value %s' % (self, value))

        return value


def resolve(value, instance):
    '''Return value itself or, if it's a Dependency, its resolution wrt instance.'''
    if isinstance(value, Dependency):
        return value.resolve(instance)

    return value
