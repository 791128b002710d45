'''COBS framed serial communications'''
import serial
from colorama import Fore
from serial.tools.list_ports import comports

from cobstools import cobsdec, cobsenc
from cobstools.cobsink import DELIMITER, ChunkSink
from cobstools.cobsutil import CobsDebug, colorize, hexdump

DEFAULT_BAUD = 115200
DEFAULT_CHUNK = 64


class CobsSerial:
    '''Send and receive COBS frames over a serial port'''

    def __init__(self, port_name, baud=DEFAULT_BAUD, timeout=0.2, debug=None):
        self.name = port_name
        self.debug = debug or CobsDebug()
        self.encoder = cobsenc.Encoder()
        self.decoder = cobsdec.Decoder()
        self.pending = bytearray()  # Received bytes not decoded yet

        # Initialize serial
        try:
            self.port = CobsSerial.get_port(port_name, baud, timeout)
        except (ValueError, serial.SerialException) as exc:
            self.debug.print_(CobsDebug.DEBUG, ' %s' % exc)
            self.port = None

    @staticmethod
    def get_port(name, baud, timeout):
        '''Return a Serial object with the required parameters'''
        driver_error = 'A device attached to the system is not functioning.'
        try:
            return serial.serial_for_url(name, baudrate=baud, timeout=timeout)
        except serial.SerialException as exc:
            if driver_error in str(exc):
                # Retry in case of Windows driver problems
                return CobsSerial.get_port(name, baud, timeout)
            raise

    def is_valid(self):
        '''Determine if the port could be opened'''
        return self.port is not None

    def is_active(self):
        '''Check if the device has been disconnected'''
        try:
            self.port.in_waiting
        except (AttributeError, OSError, serial.SerialException):
            return False
        return True

    def flush_buffer(self):
        '''Flush input and output buffers of the serial device'''
        self.port.reset_output_buffer()
        self.port.reset_input_buffer()
        self.decoder.reset()
        self.pending = bytearray()

    def close(self):
        '''Close the port'''
        if self.port:
            self.port.close()

    def send(self, payload, chunk=DEFAULT_CHUNK):
        '''Encode the payload as one frame and write it as it is produced.
        Return the number of bytes written, delimiter included.'''
        self.debug.print_(CobsDebug.FRAMES, '%s %s' % (
            colorize('%-5s>' % self.name.split('/')[-1], Fore.GREEN),
            hexdump(payload)))
        written = 0

        def write(data):
            nonlocal written
            self.debug.print_(CobsDebug.CHUNKS, hexdump(data))
            written += self.port.write(data) or 0

        payload = bytes(payload)
        for pos in range(0, len(payload), chunk):
            self.encoder.sink(payload[pos:pos + chunk], write)
        self.encoder.stop(write)
        self.port.flush()
        return written

    def receive(self):
        '''Read until a frame is complete or the port goes quiet.
        Return (payload, left), or (None, 0) if nothing was received.'''
        sink = ChunkSink()
        started = False
        while True:
            if not self.pending:
                data = self.port.read(self.port.in_waiting or 1)
                if not data:
                    break  # Read timeout
                self.debug.print_(CobsDebug.CHUNKS, hexdump(data))
                self.pending += data
            for index, byte in enumerate(self.pending):
                if byte != DELIMITER:
                    started = True
                    self.decoder.step(byte, sink)
                elif started:
                    self.decoder.stop(sink)
                    # Keep what follows for the next frame
                    self.pending = self.pending[index + 1:]
                    return self._received(sink)
            self.pending = bytearray()
        if not started:
            return None, 0
        # Finish a frame cut by the timeout
        self.decoder.stop(sink)
        return self._received(sink)

    def _received(self, sink):
        if sink.left:
            self.debug.print_(CobsDebug.FRAMES, colorize(
                ' Incomplete frame, %u bytes missing.' % sink.left, Fore.RED))
        else:
            self.debug.print_(CobsDebug.FRAMES, '%s %s' % (
                colorize('%-5s<' % self.name.split('/')[-1], Fore.YELLOW),
                hexdump(sink.data)))
        return sink.get_data(), sink.left

    def frames(self):
        '''Yield (payload, left) for every received frame until the port
        goes quiet'''
        while True:
            payload, left = self.receive()
            if payload is None:
                return
            yield payload, left


def list_ports():
    '''Return the names of the available serial ports'''
    return sorted(port for port, _, _ in comports())
