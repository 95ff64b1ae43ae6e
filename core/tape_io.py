"""
Byte-level I/O collaborators for the interpreter.

The interpreter only ever asks for one input byte at a time and writes one
output byte at a time, so sources and sinks are tiny objects with a single
method each. Terminal input is read raw (unbuffered, unechoed) when stdin is
a TTY, matching how interactive programs expect ',' to behave.
"""

import os
import sys
from typing import IO, List, Optional, Protocol

from core.instructions import split_source_lines

try:
    import termios
    import tty
except ImportError:  # not available on Windows
    termios = None  # type: ignore
    tty = None  # type: ignore


def read_source_lines(path: str, encoding: str = "utf-8") -> List[str]:
    """Read a program file into an ordered list of lines."""
    with open(path, "r", encoding=encoding, newline="") as f:
        return split_source_lines(f.read())


class InputSource(Protocol):
    def read_byte(self) -> int:
        """Block until one byte is available. Raise EOFError or OSError on failure."""
        ...


class OutputSink(Protocol):
    def write_byte(self, value: int) -> None:
        ...


class BufferedInput:
    """In-memory input. Raises EOFError once every byte has been consumed."""

    def __init__(self, data: bytes = b""):
        if isinstance(data, str):
            data = data.encode("latin-1")
        self.data = bytes(data)
        self.index = 0

    def read_byte(self) -> int:
        if self.index >= len(self.data):
            raise EOFError("input exhausted")
        value = self.data[self.index]
        self.index += 1
        return value

    @property
    def remaining(self) -> int:
        return len(self.data) - self.index


class TerminalInput:
    """Reads one raw byte at a time from a terminal (or any file-backed stream)."""

    def __init__(self, stream: Optional[IO] = None):
        self.stream = stream if stream is not None else sys.stdin

    def read_byte(self) -> int:
        if termios is not None and self.stream.isatty():
            data = self._read_raw()
        else:
            data = self._read_buffered()
        if not data:
            raise EOFError("end of input stream")
        return data[0]

    def _read_raw(self) -> bytes:
        fd = self.stream.fileno()
        old_settings = termios.tcgetattr(fd)
        try:
            tty.setraw(fd)  # no line buffering, no echo
            return os.read(fd, 1)
        finally:
            termios.tcsetattr(fd, termios.TCSADRAIN, old_settings)

    def _read_buffered(self) -> bytes:
        buffer = getattr(self.stream, "buffer", self.stream)
        return buffer.read(1)


class StreamOutput:
    """Writes raw bytes to a stream and flushes after every byte."""

    def __init__(self, stream: Optional[IO] = None):
        self.stream = stream if stream is not None else sys.stdout

    def write_byte(self, value: int) -> None:
        buffer = getattr(self.stream, "buffer", self.stream)
        buffer.write(bytes((value,)))
        buffer.flush()


class BufferedOutput:
    """Collects output bytes in memory."""

    def __init__(self):
        self.data = bytearray()

    def write_byte(self, value: int) -> None:
        self.data.append(value)

    def getvalue(self) -> bytes:
        return bytes(self.data)
