import io
import os
import select
import threading
import time

import pytest

from core import tape_io
from core.tape_io import BufferedInput, BufferedOutput, StreamOutput, TerminalInput, read_source_lines


def test_buffered_input_yields_bytes_then_eof():
    source = BufferedInput(b"hi")
    assert source.read_byte() == ord("h")
    assert source.remaining == 1
    assert source.read_byte() == ord("i")
    with pytest.raises(EOFError):
        source.read_byte()


def test_buffered_input_accepts_latin1_text():
    assert BufferedInput("\xff").read_byte() == 255


def test_buffered_output_collects_bytes():
    sink = BufferedOutput()
    sink.write_byte(0)
    sink.write_byte(255)
    assert sink.getvalue() == b"\x00\xff"


def test_stream_output_writes_raw_bytes_to_binary_buffer():
    raw = io.BytesIO()
    text = io.TextIOWrapper(raw, encoding="utf-8")
    StreamOutput(text).write_byte(0xE9)
    assert raw.getvalue() == b"\xe9"


def test_stream_output_accepts_binary_stream():
    raw = io.BytesIO()
    sink = StreamOutput(raw)
    sink.write_byte(65)
    sink.write_byte(10)
    assert raw.getvalue() == b"A\n"


def test_terminal_input_reads_one_byte_at_a_time_from_pipe():
    stream = io.TextIOWrapper(io.BytesIO(b"\x01\x02"), encoding="utf-8")
    source = TerminalInput(stream)
    assert source.read_byte() == 1
    assert source.read_byte() == 2
    with pytest.raises(EOFError):
        source.read_byte()


def test_read_source_lines(tmp_path):
    path = tmp_path / "prog.bf"
    path.write_text("+++\n# comment\r\n-\n", encoding="utf-8")
    assert read_source_lines(str(path)) == ["+++", "# comment", "-"]


def test_read_source_lines_breaks_on_newline_only(tmp_path):
    path = tmp_path / "prog.bf"
    path.write_bytes(b"+ # comment\r+\n- ; note\x0c-\r\n")
    assert read_source_lines(str(path)) == ["+ # comment\r+", "- ; note\x0c-"]


@pytest.fixture
def pty_pair():
    pty = pytest.importorskip("pty")
    master, slave = pty.openpty()
    slave_stream = os.fdopen(slave, "rb", buffering=0)
    yield master, slave_stream
    slave_stream.close()
    os.close(master)


def test_terminal_input_reads_raw_unechoed_byte_from_tty(pty_pair):
    termios = pytest.importorskip("termios")
    master, slave_stream = pty_pair
    slave = slave_stream.fileno()
    cooked = termios.tcgetattr(slave)
    assert cooked[3] & termios.ICANON

    result = []
    reader = threading.Thread(target=lambda: result.append(TerminalInput(slave_stream).read_byte()), daemon=True)
    reader.start()
    deadline = time.monotonic() + 5
    while termios.tcgetattr(slave)[3] & termios.ICANON and time.monotonic() < deadline:
        time.sleep(0.01)
    os.write(master, b"xy")
    reader.join(timeout=5)

    assert result == [ord("x")]
    # no echo came back while in raw mode
    readable, _, _ = select.select([master], [], [], 0.2)
    assert readable == []
    assert termios.tcgetattr(slave) == cooked


def test_terminal_input_restores_settings_when_read_is_interrupted(pty_pair, monkeypatch):
    termios = pytest.importorskip("termios")
    _, slave_stream = pty_pair
    cooked = termios.tcgetattr(slave_stream.fileno())

    def interrupted_read(fd, n):
        assert not termios.tcgetattr(fd)[3] & termios.ICANON
        raise KeyboardInterrupt

    monkeypatch.setattr(tape_io.os, "read", interrupted_read)
    with pytest.raises(KeyboardInterrupt):
        TerminalInput(slave_stream).read_byte()
    assert termios.tcgetattr(slave_stream.fileno()) == cooked
