import pytest

from cobstools.cobsenc import encode_frame
from cobstools.cobserial import CobsSerial, list_ports
from cobstools.cobsutil import CobsDebug


@pytest.fixture
def device():
    dev = CobsSerial('loop://', timeout=0.05)
    assert dev.is_valid()
    yield dev
    dev.close()


def test_send_writes_one_frame(device):
    payload = b'\x11\x22\x00\x33' * 100
    size = device.send(payload, chunk=7)
    expected = encode_frame(payload)
    assert size == len(expected)
    assert device.port.read(size) == expected


def test_loopback(device):
    device.send(b'\x00hello\x00')
    assert device.receive() == (b'\x00hello\x00', 0)
    assert device.receive() == (None, 0)


def test_frames_in_one_read(device):
    device.send(b'first')
    device.send(b'')
    device.send(bytes(range(256)) * 3)
    assert list(device.frames()) == [
        (b'first', 0),
        (b'', 0),
        (bytes(range(256)) * 3, 0),
    ]


def test_truncated_frame(device):
    device.port.write(b'\x05\x11')
    assert device.receive() == (b'\x11', 3)


def test_leading_delimiters_skipped(device):
    device.port.write(b'\x00\x00\x02\x11\x00')
    assert device.receive() == (b'\x11', 0)


def test_flush_buffer(device):
    device.port.write(b'\x05\x11')
    device.flush_buffer()
    device.send(b'\x22')
    assert device.receive() == (b'\x22', 0)


def test_debug_output(capsys):
    dev = CobsSerial('loop://', timeout=0.05, debug=CobsDebug.from_level(2))
    dev.send(b'\x11')
    dev.receive()
    dev.close()
    out = capsys.readouterr().out
    assert '11' in out
    assert '02' in out


def test_is_active(device):
    assert device.is_active()
    device.close()
    assert not device.is_active()


def test_invalid_port():
    dev = CobsSerial('/dev/cobstools-missing-port')
    assert not dev.is_valid()
    assert not dev.is_active()


def test_list_ports():
    assert isinstance(list_ports(), list)
