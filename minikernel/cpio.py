"""Reader for "newc" cpio archives as used for the initial ramdisk."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from minikernel.numbers import hex_to_int

HEADER_SIZE = 110
TRAILER_NAME = "TRAILER!!!"

_MODE = slice(14, 22)
_FILESIZE = slice(54, 62)
_NAMESIZE = slice(94, 102)


@dataclass(frozen=True)
class CpioEntry:
    """One member of an archive."""

    name: str
    mode: int
    data: bytes


class ArchiveFileNotFound(FileNotFoundError):
    """Raised when a named member is not in the archive."""

    def __init__(self, name: str) -> None:
        super().__init__(f"File not found: {name}")
        self.name = name


def _aligned(size: int) -> int:
    return (size + 3) & ~3


def iter_entries(data: bytes | bytearray | memoryview) -> Iterator[CpioEntry]:
    """Yield the archive's members in order, stopping at the trailer."""
    buffer = bytes(data)
    offset = 0
    while True:
        if offset + HEADER_SIZE > len(buffer):
            raise ValueError(f"truncated cpio header at offset {offset}")
        header = buffer[offset : offset + HEADER_SIZE]
        namesize = hex_to_int(header[_NAMESIZE])
        filesize = hex_to_int(header[_FILESIZE])
        mode = hex_to_int(header[_MODE])

        name_start = offset + HEADER_SIZE
        name_end = name_start + namesize
        if name_end > len(buffer):
            raise ValueError(f"truncated cpio name at offset {name_start}")
        name = buffer[name_start:name_end].split(b"\0", 1)[0].decode("utf-8", "surrogateescape")
        if name == TRAILER_NAME:
            return

        data_start = offset + _aligned(HEADER_SIZE + namesize)
        data_end = data_start + filesize
        if data_end > len(buffer):
            raise ValueError(f"truncated cpio data for {name!r}")
        yield CpioEntry(name=name, mode=mode, data=buffer[data_start:data_end])
        offset = data_start + _aligned(filesize)


def list_names(data: bytes | bytearray | memoryview) -> list[str]:
    """Return the names of all members, in archive order."""
    return [entry.name for entry in iter_entries(data)]


def read_file(data: bytes | bytearray | memoryview, name: str) -> bytes:
    """Return the contents of the first member called ``name``."""
    for entry in iter_entries(data):
        if entry.name == name:
            return entry.data
    raise ArchiveFileNotFound(name)