import pytest

from cobstools.__main__ import main
from cobstools.cobsenc import encode_frame


@pytest.fixture
def payload_file(tmp_path):
    path = tmp_path / 'payload.bin'
    path.write_bytes(b'\x00\x11\x22' * 500)
    return path


def test_encode_file(payload_file, tmp_path):
    out = tmp_path / 'frame.bin'
    assert main(['--encode', str(payload_file), '--output', str(out), '--chunk', '10']) == 0
    assert out.read_bytes() == encode_frame(payload_file.read_bytes())


def test_encode_empty_file(tmp_path):
    src = tmp_path / 'empty.bin'
    src.write_bytes(b'')
    out = tmp_path / 'frame.bin'
    main(['--encode', str(src), '--output', str(out)])
    assert out.read_bytes() == b'\x01\x00'


def test_decode_frames(tmp_path):
    src = tmp_path / 'frames.bin'
    src.write_bytes(encode_frame(b'abc\x00') + encode_frame(b'\x00def'))
    out = tmp_path / 'payload.bin'
    assert main(['--decode', str(src), '--output', str(out), '--chunk', '3']) == 0
    assert out.read_bytes() == b'abc\x00\x00def'


def test_round_trip(payload_file, tmp_path):
    frame = tmp_path / 'frame.bin'
    out = tmp_path / 'out.bin'
    main(['--encode', str(payload_file), '--output', str(frame)])
    main(['--decode', str(frame), '--output', str(out)])
    assert out.read_bytes() == payload_file.read_bytes()


def test_decode_incomplete_exits(tmp_path):
    src = tmp_path / 'frames.bin'
    src.write_bytes(encode_frame(b'ok') + b'\x05\x11')
    out = tmp_path / 'payload.bin'
    with pytest.raises(SystemExit) as excinfo:
        main(['--decode', str(src), '--output', str(out)])
    assert '1 incomplete frames' in str(excinfo.value.code)
    assert out.read_bytes() == b'ok'


def test_missing_input(tmp_path):
    with pytest.raises(SystemExit):
        main(['--encode', str(tmp_path / 'missing.bin'), '--output', str(tmp_path / 'x')])


def test_action_required():
    with pytest.raises(SystemExit):
        main([])


def test_bad_chunk(payload_file):
    with pytest.raises(SystemExit):
        main(['--encode', str(payload_file), '--chunk', '0'])


def test_send_over_loopback(payload_file, capsys):
    assert main(['--port', 'loop://', '--send', str(payload_file)]) == 0
    size = len(encode_frame(payload_file.read_bytes()))
    assert 'Sent %u bytes.' % size in capsys.readouterr().out


def test_send_invalid_port(payload_file):
    with pytest.raises(SystemExit):
        main(['--port', '/dev/cobstools-missing-port', '--send', str(payload_file)])


def test_missing_output_directory(payload_file, tmp_path):
    with pytest.raises(SystemExit) as excinfo:
        main(['--encode', str(payload_file), '--output', str(tmp_path / 'no' / 'x')])
    assert 'No such file' in str(excinfo.value.code)


def test_debug_keeps_stdout_binary(tmp_path, capsysbinary):
    src = tmp_path / 'payload.bin'
    src.write_bytes(b'\x11\x22\x00\x33')
    assert main(['--encode', str(src), '--debug', '2']) == 0
    captured = capsysbinary.readouterr()
    assert captured.out == encode_frame(b'\x11\x22\x00\x33')
    assert b'11' in captured.err


def test_decode_debug_to_stdout_with_output(tmp_path, capsys):
    src = tmp_path / 'frames.bin'
    src.write_bytes(encode_frame(b'\x42'))
    out = tmp_path / 'payload.bin'
    main(['--decode', str(src), '--output', str(out), '--debug', '1'])
    assert 'Frame 0' in capsys.readouterr().out
    assert out.read_bytes() == b'\x42'
