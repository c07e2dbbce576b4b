"""Small-object heap carved out of pages obtained from the buddy allocator."""

from __future__ import annotations

from dataclasses import dataclass, replace

from minikernel.buddy import BuddyAllocator
from minikernel.numbers import format_hex

BLOCK_SIZE = 32
PAGE_BYTES = 4096
KB_PER_PAGE = 4
DEFAULT_BUMP_START = 0x9000000


@dataclass
class Block:
    """A heap block: a header of ``BLOCK_SIZE`` bytes followed by ``size`` bytes."""

    address: int
    size: int
    free: bool
    page_number: int

    @property
    def payload(self) -> int:
        """Address handed to the caller, just past the header."""
        return self.address + BLOCK_SIZE


class Heap:
    """First-fit allocator over blocks kept in address-list order.

    Blocks from the same buddy allocation share a ``page_number`` and only
    such neighbours are merged when freed.
    """

    def __init__(self, buddy: BuddyAllocator) -> None:
        self._buddy = buddy
        self._blocks: list[Block] = []
        self._page_count = 0
        self._blocks.append(self._new_region(KB_PER_PAGE))

    def _new_region(self, size_kb: int) -> Block:
        address = self._buddy.alloc(size_kb)
        block = Block(
            address=address,
            size=size_kb // KB_PER_PAGE * PAGE_BYTES - BLOCK_SIZE,
            free=True,
            page_number=self._page_count,
        )
        self._page_count += 1
        return block

    def malloc(self, size: int) -> int:
        """Allocate ``size`` bytes and return the payload address."""
        if size < 0:
            raise ValueError(f"negative allocation size: {size}")
        length = -(-size // BLOCK_SIZE) * BLOCK_SIZE
        while True:
            for position, block in enumerate(self._blocks):
                if not block.free:
                    continue
                if block.size == length:
                    block.free = False
                    return block.payload
                if block.size >= length:
                    used = length + BLOCK_SIZE
                    rest = Block(
                        address=block.address + used,
                        size=block.size - used,
                        free=True,
                        page_number=block.page_number,
                    )
                    self._blocks.insert(position + 1, rest)
                    block.size = length
                    block.free = False
                    return block.payload
            pages = -(-(size + BLOCK_SIZE) // PAGE_BYTES)
            self._blocks.append(self._new_region(pages * KB_PER_PAGE))

    def free(self, address: int) -> None:
        """Release the block whose payload starts at ``address``."""
        position = next(
            (
                position
                for position, block in enumerate(self._blocks)
                if block.payload == address
            ),
            None,
        )
        if position is None:
            raise ValueError(f"no heap block at address {address:#x}")
        block = self._blocks[position]
        if block.free:
            raise ValueError(f"heap block at address {address:#x} is already free")
        block.free = True

        if position + 1 < len(self._blocks):
            following = self._blocks[position + 1]
            if following.free and following.page_number == block.page_number:
                block.size += following.size + BLOCK_SIZE
                del self._blocks[position + 1]

        if position > 0:
            previous = self._blocks[position - 1]
            if previous.free and previous.page_number == block.page_number:
                previous.size += block.size + BLOCK_SIZE
                del self._blocks[position]

    def blocks(self) -> list[Block]:
        """Return copies of all blocks in list order."""
        return [replace(block) for block in self._blocks]

    def dump(self) -> str:
        """Render the block list as the console listing."""
        lines = ["----------- block ----------\n"]
        lines.extend(
            f"address: {format_hex(block.address)} size: {format_hex(block.size)} "
            f"free: {format_hex(int(block.free))}\n"
            for block in self._blocks
        )
        lines.append("----------------------------\n")
        return "".join(lines)


class BumpAllocator:
    """Hands out consecutive addresses and never releases them."""

    def __init__(self, start: int = DEFAULT_BUMP_START) -> None:
        self.next_address = start

    def alloc(self, size: int) -> int:
        """Reserve ``size`` bytes and return their start address."""
        if size < 0:
            raise ValueError(f"negative allocation size: {size}")
        address = self.next_address
        self.next_address += size
        return address