#!/usr/bin/env python3
'''
Hide messages into PNG files.

 $ pngstego.py encode image.png ruSt 'this is a secret'
 $ pngstego.py decode image.png ruSt
'''
from pngme.cli import main


if __name__ == '__main__':
    main()
