import io

import pytest
from PIL import Image


@pytest.fixture
def png_bytes():
    '''A real 5x5 red image as written by Pillow.'''
    buffer = io.BytesIO()
    Image.new('RGB', (5, 5), color=(255, 0, 0)).save(buffer, format='PNG')

    return buffer.getvalue()


@pytest.fixture
def png_path(tmp_path, png_bytes):
    path = tmp_path / 'red.png'
    path.write_bytes(png_bytes)

    return path
