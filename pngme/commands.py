'''
Operations on PNG files on disk: each one reads the whole file, works on the
parsed representation and, when it changes something, writes it back.
'''
import logging
from pathlib import Path

from .png import PNGFile, PNGChunk
from .exceptions import ChunkNotFoundException, PayloadDecodeException


logger = logging.getLogger(__name__)


def load(path) -> PNGFile:
    logger.debug('loading \'%s\'', path)
    return PNGFile(Path(path))


def save(png: PNGFile, path):
    data = png.pack()
    Path(path).write_bytes(data)
    logger.debug('written %d bytes to \'%s\'', len(data), path)


def encode(path, chunk_type, message, output=None) -> PNGChunk:
    '''Hide the message in a new chunk at the end of the file.'''
    png = load(path)

    chunk = png.append(chunk_type, message.encode('utf-8'))

    save(png, output if output is not None else path)

    return chunk


def decode(path, chunk_type) -> str:
    png = load(path)

    chunk = png.chunk_by_type(chunk_type)
    if chunk is None:
        raise ChunkNotFoundException(chunk_type)

    return chunk.payload_as_text()


def remove(path, chunk_type) -> PNGChunk:
    png = load(path)

    chunk = png.remove_chunk(chunk_type)

    save(png, path)

    return chunk


def describe_chunk(chunk: PNGChunk) -> str:
    tag = chunk.tag
    flags = ''.join([
        'C' if tag.is_critical() else 'a',
        'P' if tag.is_public() else 'p',
        'R' if tag.is_reserved_bit_valid() else 'r',
        's' if tag.is_safe_to_copy() else 'U',
    ])

    try:
        text = repr(chunk.payload_as_text())
    except PayloadDecodeException:
        text = '<binary>'

    return f'{tag} length={chunk.length.value} crc={chunk.crc} flags={flags} {text}'


def print_chunks(path) -> str:
    png = load(path)

    lines = [f'signature: {png.signature.hex()}']
    for idx, chunk in enumerate(png.chunks):
        lines.append(f'[{idx:02d}] {describe_chunk(chunk)}')

    return '\n'.join(lines)
