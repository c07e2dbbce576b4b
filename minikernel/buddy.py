"""Buddy page-frame allocator with one free list per block order."""

from __future__ import annotations

from collections import OrderedDict
from collections.abc import Iterable

from minikernel.numbers import format_hex, log2, pow2

MEMORY_BASE = 0x0
PAGE_SIZE = 0x1000
MAX_PAGES = 0x40000
MIN_BLOCK_KB = 4

BELONG_LEFT = -1
ALLOCATED = -2

DEFAULT_RESERVED: tuple[tuple[int, int], ...] = (
    (0x0, 0x1000),
    (0x7E000, 0x80000),
    (0x3C000000, 0x40000000),
)


class AllocationError(MemoryError):
    """Raised when a block cannot be allocated or released."""


def suitable_size(size_kb: int) -> int:
    """Round a request in KB up to the nearest block size, at least one page."""
    size = MIN_BLOCK_KB
    while size < size_kb:
        size <<= 1
    return size


class BuddyAllocator:
    """Allocates power-of-two runs of pages, merging freed buddies back together.

    Each page records its state: the order of the free block it heads, or
    ``BELONG_LEFT`` when it lies inside a larger free block, or ``ALLOCATED``.
    """

    def __init__(
        self,
        total_pages: int = MAX_PAGES,
        reserved: Iterable[tuple[int, int]] | None = None,
    ) -> None:
        if total_pages < 1 or total_pages & (total_pages - 1):
            raise ValueError(f"page count must be a power of two: {total_pages}")
        self.total_pages = total_pages
        self.max_level = log2(total_pages)
        self._frames = [0] * total_pages
        self._levels = [0] * total_pages
        self._free: list[OrderedDict[int, None]] = [
            OrderedDict() for _ in range(self.max_level + 1)
        ]
        self._free[0].update(dict.fromkeys(range(total_pages)))

        for start, end in reserved or ():
            self.reserve(start, end)

        for index in range(total_pages):
            self._coalesce(index)

    def _push_front(self, level: int, index: int) -> None:
        free = self._free[level]
        free[index] = None
        free.move_to_end(index, last=False)

    def _unlink(self, index: int) -> None:
        for free in self._free:
            if free.pop(index, False) is None:
                return

    def _coalesce(self, index: int) -> None:
        while True:
            level = self._frames[index]
            if level < 0 or level >= self.max_level:
                return
            buddy = index ^ pow2(level)
            if self._frames[buddy] != level:
                return
            first, second = sorted((index, buddy))
            self._free[level].pop(first, None)
            self._free[level].pop(second, None)
            self._frames[first] = level + 1
            self._frames[second] = BELONG_LEFT
            self._levels[first] = level + 1
            self._push_front(level + 1, first)
            index = first

    def _split(self, level: int) -> bool:
        if level > self.max_level:
            return False
        if not self._free[level] and not self._split(level + 1):
            return False
        index, _ = self._free[level].popitem(last=False)
        half = pow2(level - 1)
        for page in (index, index + half):
            self._frames[page] = level - 1
            self._levels[page] = level - 1
        self._push_front(level - 1, index + half)
        self._push_front(level - 1, index)
        return True

    def reserve(self, start: int, end: int) -> None:
        """Mark every page overlapping the address range [start, end) as in use."""
        if end <= start:
            raise ValueError(f"empty range: {start:#x}..{end:#x}")
        first_page = (start - MEMORY_BASE) // PAGE_SIZE
        last_page = (end - MEMORY_BASE - 1) // PAGE_SIZE
        if first_page < 0 or last_page >= self.total_pages:
            raise ValueError(f"range {start:#x}..{end:#x} lies outside managed memory")
        pages = range(first_page, last_page + 1)
        for page in pages:
            if self._frames[page] not in (0, ALLOCATED):
                raise AllocationError(f"page {page} is part of a merged free block")
        for page in pages:
            self._frames[page] = ALLOCATED
            self._unlink(page)

    def alloc(self, size_kb: int) -> int:
        """Allocate a block of at least ``size_kb`` KB and return its address."""
        level = log2(suitable_size(size_kb) // MIN_BLOCK_KB)
        if level > self.max_level or (
            not self._free[level] and not self._split(level + 1)
        ):
            raise AllocationError(f"no free block for {size_kb} KB")
        index, _ = self._free[level].popitem(last=False)
        self._frames[index] = ALLOCATED
        return MEMORY_BASE + index * PAGE_SIZE

    def free(self, index: int) -> None:
        """Release the allocated block that starts at page ``index``."""
        if not 0 <= index < self.total_pages:
            raise IndexError(f"page index out of range: {index}")
        if self._frames[index] != ALLOCATED:
            raise AllocationError(f"page {index} is not allocated")
        level = self._levels[index]
        self._frames[index] = level
        self._push_front(level, index)
        self._coalesce(index)

    def free_lists(self) -> list[list[int]]:
        """Return the first page of each free block, per order, front first."""
        return [list(free) for free in self._free]

    def dump(self) -> str:
        """Render the free lists as the console listing."""
        lines = ["----------- list ----------\n"]
        for level, free in enumerate(self._free):
            entries = "".join(f"{format_hex(index)} " for index in free)
            lines.append(f"head[{format_hex(level)}]: {entries}\n")
        lines.append("\n----------------------------\n")
        return "".join(lines)