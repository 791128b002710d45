'''COBS tool for encoding, decoding and exchanging frames over serial ports'''
import argparse
import os
import sys
from time import sleep

import tqdm
from colorama import Fore, Style

from cobstools import __version__, cobsdec, cobsenc, cobserial
from cobstools.cobsutil import (CobsDebug, colorize, hexdump, init_console,
                                sys_exit, try_input)

LOGO = '\
****************************************************************************\n\
**                               COBS Tool                                **\n\
****************************************************************************\n\
'


def _get_port():
    '''Ask user to choose a port among the available ones'''
    print('Scanning ports...', end='')
    ports = cobserial.list_ports()
    if ports:
        print('\rAvailable serial ports:')
        for num, port in enumerate(ports):
            print('%s%d%s:  %s' % (Fore.GREEN, num + 1, Fore.RESET, port))
        # Don't ask the user if there is only one option
        if len(ports) == 1:
            return ports[0]
        index = 0
        while index not in range(1, len(ports) + 1):
            typed = try_input('Enter port index: ')
            if typed.isdigit():
                index = int(typed)
        return ports[index - 1]
    sys_exit('No serial ports available.')
    return None


def _read_chunks(in_file, chunk, desc):
    '''Yield the file contents in chunks showing the progress'''
    size = os.fstat(in_file.fileno()).st_size
    with tqdm.tqdm(
        total=size,
        unit='B',
        unit_scale=True,
        desc=colorize(desc, Fore.CYAN),
        dynamic_ncols=True,
        leave=False,
        file=sys.stderr,
    ) as progress:
        while True:
            data = in_file.read(chunk)
            if not data:
                return
            progress.update(len(data))
            yield data


def encode_file(path, out, chunk, debug):
    '''Write the file contents as one COBS frame, return its size'''
    encoder = cobsenc.Encoder()
    written = 0

    def write(data):
        nonlocal written
        debug.print_(CobsDebug.CHUNKS, hexdump(data))
        out.write(data)
        written += len(data)

    with open(path, 'rb') as in_file:
        for data in _read_chunks(in_file, chunk, os.path.basename(path)):
            encoder.sink(data, write)
    encoder.stop(write)
    return written


def decode_file(path, out, chunk, debug):
    '''Write the payload of every frame in the file.
    Return the number of complete and incomplete frames.'''
    good = bad = 0
    with open(path, 'rb') as in_file:
        chunks = _read_chunks(in_file, chunk, os.path.basename(path))
        for num, (payload, left) in enumerate(cobsdec.iter_frames(chunks)):
            if left:
                bad += 1
                debug.print_(CobsDebug.FRAMES, colorize(
                    'Frame %u: %u bytes missing.' % (num, left), Fore.RED))
                continue
            good += 1
            debug.print_(CobsDebug.FRAMES, 'Frame %u: %s' % (num, hexdump(payload)))
            out.write(payload)
    return good, bad


def listen(device):
    '''Print received frames until the port is lost'''
    while device.is_active():
        for payload, left in device.frames():
            if left:
                print(colorize('Incomplete frame, %u bytes missing.' % left, Fore.RED))
            else:
                print('%s%s%s' % (Fore.CYAN, hexdump(payload), Style.RESET_ALL))
        sleep(0.1)
    print(colorize('\nConnection with the port was lost.', Fore.RED))


def main(argv=None):
    '''Parse input and run the requested action'''
    parser = argparse.ArgumentParser(
        prog='cobstools',
        description='Consistent Overhead Byte Stuffing encoder, decoder and serial framer',
    )
    parser.add_argument(
        '--version', action='version', version='%(prog)s ' + __version__
    )
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument('--encode', type=str, help='file to encode as one frame')
    action.add_argument('--decode', type=str, help='file with frames to decode')
    action.add_argument('--send', type=str, help='file to send as one frame')
    action.add_argument(
        '--listen', action='store_true', help='print frames received on the port'
    )
    parser.add_argument(
        '--output', type=str, default=None, help='output file (default stdout)'
    )
    parser.add_argument(
        '--chunk',
        type=int,
        default=cobserial.DEFAULT_CHUNK,
        help='bytes read from the input on each step',
    )
    parser.add_argument('--port', type=str, help='serial device to use')
    parser.add_argument(
        '--baud', type=int, default=cobserial.DEFAULT_BAUD, help='serial baud rate'
    )
    parser.add_argument(
        '--debug',
        type=int,
        choices=range(0, 4),
        default=0,
        help='show more program output',
    )
    args = parser.parse_args(argv)
    if args.chunk < 1:
        parser.error('--chunk must be positive')

    init_console()

    # Local file conversion
    if args.encode or args.decode:
        # Keep stdout for the binary output
        debug = CobsDebug.from_level(
            args.debug, stream=None if args.output else sys.stderr)
        out = None
        try:
            if args.output:
                out = open(args.output, 'wb')
            else:
                out = sys.stdout.buffer
            if args.encode:
                size = encode_file(args.encode, out, args.chunk, debug)
                debug.print_(CobsDebug.DEBUG, ' [Encoded %u bytes]' % size)
                return 0
            good, bad = decode_file(args.decode, out, args.chunk, debug)
        except OSError as exc:
            sys_exit(str(exc))
        finally:
            if args.output and out is not None:
                out.close()
        debug.print_(CobsDebug.DEBUG, ' [Decoded %u frames]' % good)
        if bad:
            sys_exit('%u incomplete frames.' % bad)
        return 0

    # Serial port
    debug = CobsDebug.from_level(args.debug)
    print(Fore.BLUE + Style.BRIGHT + LOGO + Style.RESET_ALL)
    if not args.port:
        args.port = _get_port()
    device = cobserial.CobsSerial(args.port, baud=args.baud, debug=debug)
    if not device.is_valid():
        sys_exit('Could not open %s.' % args.port)
    try:
        if args.send:
            with open(args.send, 'rb') as in_file:
                size = device.send(in_file.read(), chunk=args.chunk)
            print('Sent %u bytes.' % size)
        else:
            listen(device)
    except OSError as exc:
        sys_exit(str(exc))
    except (KeyboardInterrupt, EOFError):
        print('\nProgram finished by user.')
    finally:
        device.close()
    return 0


if __name__ == '__main__':
    sys.exit(main())
