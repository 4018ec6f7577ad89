import io
import os
import logging


logger = logging.getLogger(__name__)


class Stream(object):
    '''This is a simple wrapper around bytes/path/file objects to
    uniform their properties: the whole content is buffered in memory
    so that it's always possible to know how many bytes are left.'''
    def __init__(self, obj):
        '''Here we normalize the object in order to be accessed as a normal file object'''
        if isinstance(obj, os.PathLike):
            obj = os.fspath(obj)
        if isinstance(obj, (bytearray, memoryview)):
            obj = bytes(obj)

        self.obj = obj
        self.history = []

        init_method_name = 'init_%s' % self.obj.__class__.__name__

        init_method = getattr(self, init_method_name, self.init_file)

        init_method()

    def __getattr__(self, name):
        if name == 'obj':
            raise AttributeError(name)
        return getattr(self.obj, name)

    def __repr__(self):
        return f'<{self.__class__.__name__}(size={self.size}, offset={self.tell()})>'

    def init_str(self):
        '''We think this is a path'''
        logger.debug('opening path \'%s\'', self.obj)
        with open(self.obj, 'rb') as f:
            self.obj = io.BytesIO(f.read())

    def init_bytes(self):
        '''We think these are raw bytes'''
        self.obj = io.BytesIO(self.obj)

    def init_file(self):
        '''Anything else must behave like a binary file'''
        if not hasattr(self.obj, 'read'):
            raise ValueError('\'%s\' is the wrong kind of object to use as stream' % self.obj.__class__.__name__)

        self.obj = io.BytesIO(self.obj.read())

    @property
    def size(self):
        return self.obj.getbuffer().nbytes

    def seek(self, offset):
        if not isinstance(offset, int):
            raise ValueError('\'%s\' is the wrong kind of offset to use' % offset.__class__.__name__)

        self.obj.seek(offset)

        return self

    def remaining(self):
        return self.size - self.obj.tell()

    def is_exhausted(self):
        return self.remaining() <= 0

    def peek(self, n):
        '''Read n bytes without moving the offset.'''
        self.save()
        try:
            return self.obj.read(n)
        finally:
            self.restore()

    def read_all(self):
        return self.obj.read()

    def write(self, data):
        return self.obj.write(data)

    def save(self):
        self.history.append(self.obj.tell())

    def restore(self):
        old_seek = self.history.pop()
        self.obj.seek(old_seek)
