from cobstools.cobsenc import encode_into
from cobstools.cobsink import (BufferSink, ChunkSink, DecodeResult,
                               max_encoded_size)
from cobstools.cobsutil import CobsDebug, hexdump


def test_max_encoded_size():
    assert max_encoded_size(0) == 1
    assert max_encoded_size(253) == 254
    assert max_encoded_size(254) == 255
    assert max_encoded_size(255) == 257
    assert max_encoded_size(508) == 510


def test_max_encoded_size_reached_by_zero_free_payloads():
    for size in (1, 253, 254, 255, 508, 509, 1000):
        assert encode_into(b'\x01' * size, bytearray()) == max_encoded_size(size)


def test_decode_result():
    assert DecodeResult(3, 0).complete
    assert DecodeResult(0, 0)
    assert not DecodeResult(0, 5)
    assert DecodeResult(0, 5).left == 5


def test_buffer_sink_counts_past_capacity():
    out = bytearray(3)
    sink = BufferSink(out)
    sink(b'\x01\x02')
    sink(b'\x03\x04\x05', 0)
    sink(b'', 2)
    assert sink.size == 5
    assert sink.written == 3
    assert sink.left == 2
    assert out == b'\x01\x02\x03'


def test_chunk_sink():
    sink = ChunkSink()
    sink(b'\x01')
    sink(b'\x02', 4)
    assert sink.get_data() == b'\x01\x02'
    assert sink.calls == 2
    assert sink.left == 4
    sink.clear()
    assert sink.get_data() == b''
    assert sink.left == 0


def test_hexdump():
    dump = hexdump(b'\x01\xab')
    assert '01' in dump
    assert 'ab' in dump
    assert dump.startswith('|')


def test_debug_options(capsys):
    debug = CobsDebug.from_level(CobsDebug.FRAMES)
    assert debug.has_option(CobsDebug.FRAMES)
    assert not debug.has_option(CobsDebug.CHUNKS)
    debug.print_(CobsDebug.FRAMES, 'shown')
    debug.print_(CobsDebug.CHUNKS, 'hidden')
    out = capsys.readouterr().out
    assert 'shown' in out
    assert 'hidden' not in out
