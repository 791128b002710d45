'''Output sinks shared by the COBS encoders and decoders.

Any callable can be a sink. Encoders call ``sink(chunk)``, decoders call
``sink(chunk, left)`` where ``left`` is the number of data bytes a frame
still owed when it was finalized (0 for a well formed frame).
'''
from collections import namedtuple

DELIMITER = 0x00
MAX_BLOCK = 254  # Data bytes in a full block
FULL_BLOCK_CODE = MAX_BLOCK + 1


def max_encoded_size(size):
    '''Worst case encoded length of a payload of the given size,
    not counting the frame delimiter'''
    return size + max(1, -(-size // MAX_BLOCK))


class DecodeResult(namedtuple('DecodeResult', ['size', 'left'])):
    '''Outcome of a one-shot decode.

    A complete frame has ``left == 0`` and ``size`` holds the decoded
    length. An incomplete frame has ``size == 0`` and ``left`` holds the
    number of data bytes that never arrived.'''

    __slots__ = ()

    @property
    def complete(self):
        return self.left == 0

    def __bool__(self):
        return self.complete


class BufferSink:
    '''Sink writing into a caller owned buffer.

    Every offered byte is counted in ``size`` but only the bytes that fit
    in the buffer are written, so the count is the required buffer size.'''

    def __init__(self, out):
        self.out = memoryview(out).cast('B')
        self.size = 0
        self.left = 0

    @property
    def written(self):
        '''Number of bytes actually stored in the buffer'''
        return min(self.size, len(self.out))

    def __call__(self, chunk, left=0):
        room = len(self.out) - self.size
        if room > 0:
            fit = min(room, len(chunk))
            self.out[self.size:self.size + fit] = bytes(chunk[:fit])
        self.size += len(chunk)
        self.left = max(self.left, left)


class ChunkSink:
    '''Sink collecting every chunk into one bytearray'''

    def __init__(self):
        self.data = bytearray()
        self.calls = 0
        self.left = 0

    def __call__(self, chunk, left=0):
        self.data += chunk
        self.calls += 1
        self.left = left

    def get_data(self):
        '''Return the collected bytes'''
        return bytes(self.data)

    def clear(self):
        self.data = bytearray()
        self.calls = 0
        self.left = 0
