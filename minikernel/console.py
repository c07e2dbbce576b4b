"""Serial-style console: polled over streams, or buffered for interrupt handlers."""

from __future__ import annotations

from typing import TextIO

from minikernel.numbers import format_hex
from minikernel.ringqueue import RingQueue


def _as_char(char: str | int) -> str:
    if isinstance(char, int):
        return chr(char & 0xFF)
    if len(char) != 1:
        raise ValueError(f"expected a single character: {char!r}")
    return char


def _to_wire(text: str) -> str:
    """Expand each newline to carriage return plus newline."""
    return text.replace("\n", "\r\n")


class Console:
    """A console reading from and writing to text streams."""

    def __init__(self, reader: TextIO, writer: TextIO) -> None:
        self._reader = reader
        self._writer = writer

    def _write(self, text: str) -> None:
        self._writer.write(text)
        flush = getattr(self._writer, "flush", None)
        if flush is not None:
            flush()

    def send(self, char: str | int) -> None:
        """Write one character unchanged."""
        self._write(_as_char(char))

    def getc_raw(self) -> str:
        """Read one character as received."""
        char = self._reader.read(1)
        if not char:
            raise EOFError("console input exhausted")
        return char

    def getc(self) -> str:
        """Read one character, turning carriage return into newline."""
        char = self.getc_raw()
        return "\n" if char == "\r" else char

    def puts(self, text: str) -> None:
        self._write(_to_wire(text))

    def hex(self, value: int) -> None:
        """Write the low 32 bits of ``value`` as eight hex digits."""
        self._write(format_hex(value))

    def read_line(self) -> str:
        """Read and echo characters up to a newline, which is not returned."""
        chars = []
        while (char := self.getc()) != "\n":
            self.send(char)
            chars.append(char)
        self.puts("\n")
        return "".join(chars)

    def read_raw(self, count: int) -> str:
        """Read exactly ``count`` characters without conversion."""
        if count < 0:
            raise ValueError(f"negative count: {count}")
        return "".join(self.getc_raw() for _ in range(count))


class BufferedConsole:
    """A console whose traffic passes through ring buffers, fed by an interrupt handler."""

    def __init__(self, size: int = 1024) -> None:
        self._read_buf = RingQueue(size)
        self._write_buf = RingQueue(size)
        self.transmit_enabled = False

    def send(self, char: str | int) -> None:
        """Queue one character and enable transmission if the queue was idle."""
        was_empty = self._write_buf.empty()
        self._write_buf.push(_as_char(char))
        if was_empty:
            self.transmit_enabled = True

    def getc(self) -> str:
        """Take one received character, turning carriage return into newline."""
        if self._read_buf.empty():
            raise BlockingIOError("no input pending")
        char = self._read_buf.pop()
        return "\n" if char == "\r" else char

    def puts(self, text: str) -> None:
        for char in _to_wire(text):
            self.send(char)

    def hex(self, value: int) -> None:
        self.puts(format_hex(value))

    def receive(self, char: str | int) -> bool:
        """Store a character arriving on the line; return False if it was dropped."""
        if self._read_buf.full():
            return False
        return self._read_buf.push(_as_char(char))

    def transmit(self) -> str | None:
        """Hand the next queued character to the line, or None when idle."""
        if self._write_buf.empty():
            return None
        char = self._write_buf.pop()
        if self._write_buf.empty():
            self.transmit_enabled = False
        return char