'''COBS encoders: one-shot and streaming.

Every block is a code byte followed by ``code - 1`` non-zero data bytes.
A code of 0xff marks a full block of 254 bytes with no implicit zero
after it. The frame delimiter is only written by ``Encoder.stop`` and
``encode_frame``; the one-shot encoders leave it to the caller.
'''
from cobstools.cobsink import (DELIMITER, FULL_BLOCK_CODE, MAX_BLOCK,
                               BufferSink, ChunkSink)
from cobstools.cobsutil import hexdump


def _blocks(data):
    '''Yield the (code, data) blocks encoding data'''
    runs = data.split(bytes([DELIMITER]))
    last = len(runs) - 1
    for index, run in enumerate(runs):
        full, rest = divmod(len(run), MAX_BLOCK)
        for num in range(full):
            yield FULL_BLOCK_CODE, run[num * MAX_BLOCK:(num + 1) * MAX_BLOCK]
        # A run ending the input on a block boundary needs no closing block
        if index == last and full and not rest:
            break
        yield rest + 1, run[full * MAX_BLOCK:]


def encode(data, sink):
    '''Encode data sending one chunk per block to sink.
    Return the number of encoded bytes, delimiter not included.'''
    total = 0
    for code, block in _blocks(bytes(data)):
        chunk = bytes([code]) + block
        sink(chunk)
        total += len(chunk)
    return total


def encode_into(data, out):
    '''Encode data into the out buffer and return the required size.

    Only as many bytes as fit are written. A returned size bigger than
    the buffer means the call must be repeated with a bigger one.'''
    sink = BufferSink(out)
    encode(data, sink)
    return sink.size


def encode_frame(data):
    '''Return the encoded data followed by the frame delimiter'''
    sink = ChunkSink()
    encode(data, sink)
    sink(bytes([DELIMITER]))
    return sink.get_data()


class Encoder:
    '''Streaming COBS encoder.

    Input may arrive in fragments of any size. Blocks are handed to the
    callback as soon as they are complete and ``stop`` closes the frame
    with the delimiter. After ``stop`` the encoder is ready for the next
    frame.'''

    def __init__(self):
        self.data = bytearray()  # Pending block

    @property
    def pending(self):
        '''Data bytes of the block under construction'''
        return bytes(self.data)

    def reset(self):
        '''Drop the pending block'''
        self.data = bytearray()

    def sink(self, fragment, cb):
        '''Encode a fragment, calling cb with every completed block'''
        for byte in bytearray(fragment):
            self.step(byte, cb)

    def step(self, byte, cb):
        '''Encode a single byte'''
        if len(self.data) == MAX_BLOCK:
            self._flush(cb)
        if byte == DELIMITER:
            self._flush(cb)
        else:
            self.data.append(byte)

    def stop(self, cb):
        '''Flush the pending block together with the delimiter'''
        cb(bytes([len(self.data) + 1]) + self.data + bytes([DELIMITER]))
        self.reset()

    def _flush(self, cb):
        cb(bytes([len(self.data) + 1]) + self.data)
        self.reset()

    def __str__(self):
        return hexdump(bytes([len(self.data) + 1]) + self.data)
