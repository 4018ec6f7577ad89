import os
import sys
import logging

from . import commands
from .exceptions import PngmeException


logger = logging.getLogger(__name__)

USAGE = '''usage: {progname} <command> <arguments>

commands:
  encode <file> <chunk type> <message> [output]
  decode <file> <chunk type>
  remove <file> <chunk type>
  print  <file>

Set the environment variable DEBUG to see what happens during parsing.'''

# command -> (minimum and maximum number of arguments)
ARITY = {
    'encode': (3, 4),
    'decode': (2, 2),
    'remove': (2, 2),
    'print':  (1, 1),
}


def usage(progname):
    print(USAGE.format(progname=progname))
    sys.exit(1)


def run(command, args):
    if command == 'encode':
        chunk = commands.encode(*args)
        print(f'added chunk {chunk.tag} with {chunk.length.value} bytes')
    elif command == 'decode':
        print(commands.decode(*args))
    elif command == 'remove':
        chunk = commands.remove(*args)
        print(f'removed chunk {chunk.tag}')
    elif command == 'print':
        print(commands.print_chunks(*args))


def main(argv=None):
    argv = sys.argv if argv is None else argv

    logging.basicConfig(level=logging.DEBUG if 'DEBUG' in os.environ else logging.INFO)

    progname = os.path.basename(argv[0]) if argv else 'pngme'

    if len(argv) < 2 or argv[1] not in ARITY:
        usage(progname)

    command, args = argv[1], argv[2:]
    minimum, maximum = ARITY[command]

    if not minimum <= len(args) <= maximum:
        usage(progname)

    try:
        run(command, args)
    except (PngmeException, OSError) as e:
        logger.error('%s failed: %s', command, e)
        sys.exit(1)
