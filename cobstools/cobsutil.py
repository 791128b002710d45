'''Console helpers shared by the serial layer and the command line tool'''
import sys
from time import sleep

import colorama
from colorama import Back, Fore, Style


def hexdump(data):
    '''Return a bytes array as a coloured string'''
    string = '|'
    for byte in bytearray(data):
        string += ' %s%02x%s :' % (Fore.CYAN, byte, Fore.RESET)
    string += '\b|'
    return string


def colorize(msg, color):
    '''Return the message colorized'''
    return '%s%s%s' % (color, msg, Fore.RESET)


def sys_exit(msg):
    '''Exit with a red message'''
    sys.exit(colorize(msg, Fore.RED))


def try_input(txt=None):
    '''Normal input but catching the keyboard interruption'''
    sys.stdout.write(
        '%s%s%s%s%s '
        % (Style.BRIGHT, Back.BLUE, Fore.WHITE, txt, Style.RESET_ALL)
    )
    try:
        typed = input().strip()
    except (KeyboardInterrupt, EOFError):
        sys.exit('Program finished by the user.')
    return typed


class CobsDebug:
    '''Used by CobsSerial and the command line tool to show different
    information in stdout, or in the given stream.
    Options: NONE, FRAMES, CHUNKS, DEBUG'''
    NONE = 0
    FRAMES = 1
    CHUNKS = 2
    DEBUG = 3

    def __init__(self, *args, stream=None):
        self.stream = stream  # None means sys.stdout
        self._options = []
        if self.FRAMES in args:
            self._options.append(self.FRAMES)
        if self.CHUNKS in args:
            self._options.append(self.CHUNKS)
        if self.DEBUG in args:
            self._options.append(self.DEBUG)

    @classmethod
    def from_level(cls, level, stream=None):
        '''Return an instance with every option up to level enabled'''
        return cls(*range(1, level + 1), stream=stream)

    def print_(self, option, txt):
        '''Print the text if the option is enabled'''
        if option in self._options:
            if option == self.DEBUG:
                txt = Fore.BLACK + Back.CYAN + str(txt) + Style.RESET_ALL
                sleep(0.01)  # Try to avoid stdout concurrency problems
            stream = self.stream or sys.stdout
            stream.write(str(txt) + '\n')  # Otherwise print makes two calls

    def has_option(self, option):
        '''Return True if the current instance has the option activated'''
        return option in self._options


def init_console():
    '''Enable ANSI colours on Windows terminals'''
    colorama.just_fix_windows_console()
