'''COBS decoders: one-shot and streaming.

Decoders never raise on malformed input. A frame ending before its last
block got all of its data bytes is reported through ``left``, the number
of bytes still owed, which is 0 for every well formed frame.

A 0x00 found where a data byte was expected ends the frame in every
decoder, so such a frame is reported as truncated. Decoders that copy
that zero through as data give a different payload for this malformed
input.
'''
from cobstools.cobsink import (DELIMITER, FULL_BLOCK_CODE, BufferSink,
                               ChunkSink, DecodeResult)
from cobstools.cobsutil import hexdump

_ZERO = bytes([DELIMITER])


class IncompleteFrameError(ValueError):
    '''Raised by decode_frame when the frame is truncated'''

    def __init__(self, left):
        ValueError.__init__(self, 'COBS frame truncated, %u bytes missing' % left)
        self.left = left


def decode(data, sink):
    '''Decode data, trailing delimiter optional, calling sink(chunk, left)
    with the decoded chunks. Decoding ends at the first delimiter, even
    one found where a data byte was expected.'''
    data = bytes(data)
    end = len(data)
    pos = 0
    prev = FULL_BLOCK_CODE  # No implicit zero before the first block
    owed = 0
    total = 0
    while pos < end:
        code = data[pos]
        pos += 1
        if code == DELIMITER:
            break
        if prev != FULL_BLOCK_CODE:
            sink(_ZERO, 0)
            total += 1
        prev = code
        chunk = data[pos:pos + code - 1]
        cut = chunk.find(DELIMITER)
        if cut >= 0:
            chunk = chunk[:cut]  # Delimiter inside the block
        if chunk:
            sink(chunk, 0)
            total += len(chunk)
            pos += len(chunk)
        owed = code - 1 - len(chunk)
        if cut >= 0:
            break
    if owed:
        sink(b'', owed)
        return DecodeResult(0, owed)
    return DecodeResult(total, 0)


def decode_into(data, out):
    '''Decode data into the out buffer.

    The result size is the full decoded length even if the buffer is
    smaller, in which case only the bytes that fit are written.'''
    return decode(data, BufferSink(out))


def decode_frame(frame):
    '''Return the payload of a complete frame'''
    sink = ChunkSink()
    result = decode(frame, sink)
    if not result:
        raise IncompleteFrameError(result.left)
    return sink.get_data()


class Decoder:
    '''Streaming COBS decoder.

    Feed the delimiter through ``sink`` or call ``stop`` at the end of a
    frame. The last callback of a frame carries ``left``: 0 for a well
    formed frame, the number of missing data bytes otherwise. The decoder
    is then ready for the next frame.'''

    def __init__(self):
        self.code = 0  # Code of the block in flight, 0 if none
        self.data = bytearray()

    @property
    def in_flight(self):
        return self.code != 0

    def reset(self):
        '''Wait for the first code byte of a new frame'''
        self.code = 0
        self.data = bytearray()

    def sink(self, fragment, cb):
        '''Decode a fragment, calling cb(chunk, left) when chunks are ready'''
        for byte in bytearray(fragment):
            self.step(byte, cb)

    def step(self, byte, cb):
        '''Decode a single byte'''
        if byte == DELIMITER:
            self.stop(cb)
            return
        if not self.code or len(self.data) + 1 == self.code:
            if self.code and self.code != FULL_BLOCK_CODE:
                self.data.append(DELIMITER)
            cb(bytes(self.data), 0)
            self.data = bytearray()
            self.code = byte
        else:
            self.data.append(byte)

    def stop(self, cb):
        '''Finish the current frame without a delimiter'''
        left = self.code - len(self.data) - 1 if self.code else 0
        cb(bytes(self.data), left)
        self.reset()

    def __str__(self):
        return hexdump(self.data)


def iter_frames(stream):
    '''Decode an iterable of byte fragments.
    Yield a (payload, left) tuple for every frame found.'''
    decoder = Decoder()
    sink = ChunkSink()
    started = False
    for fragment in stream:
        for byte in bytearray(fragment):
            if byte != DELIMITER:
                started = True
                decoder.step(byte, sink)
            elif started:
                decoder.stop(sink)
                yield sink.get_data(), sink.left
                sink.clear()
                started = False
    if started:
        decoder.stop(sink)
        yield sink.get_data(), sink.left
