"""Interactive command shell tying the console to the archive, allocators and timers."""

from __future__ import annotations

import argparse
import sys
import time
from collections.abc import Callable

from minikernel.buddy import DEFAULT_RESERVED, MAX_PAGES, PAGE_SIZE, AllocationError, BuddyAllocator
from minikernel.console import Console
from minikernel.cpio import ArchiveFileNotFound, list_names, read_file
from minikernel.heap import BumpAllocator, Heap
from minikernel.numbers import atoi, format_hex
from minikernel.timers import MessageQueue

PROMPT = "\r# "
ERROR_COMMAND = "Error command!\n"
INVALID_NUMBER = "Invalid number!\n"


class Shell:
    """Reads commands from a console and runs them against the kernel services.

    Any service may be None; its commands are then treated as unknown.
    ``heap`` may be a :class:`Heap` or a :class:`BumpAllocator`.
    """

    def __init__(
        self,
        console: Console,
        archive: bytes | None = None,
        buddy: BuddyAllocator | None = None,
        heap: Heap | BumpAllocator | None = None,
        timers: MessageQueue | None = None,
    ) -> None:
        self.console = console
        self.archive = archive
        self.buddy = buddy
        self.heap = heap
        self.timers = timers
        self.clock: Callable[[], float] = time.monotonic
        self._pointers: list[int | None] = []

    def _handler(self, command: str) -> Callable[[], None] | None:
        table: dict[str, tuple[Callable[[], None], object]] = {
            "ls": (self._ls, self.archive),
            "cat": (self._cat, self.archive),
            "A": (self._buddy_alloc, self.buddy),
            "D": (self._buddy_free, self.buddy),
            "malloc": (self._malloc, self.heap),
            "free": (self._free, self.heap),
            "st": (self._set_timeout, self.timers),
        }
        handler, service = table.get(command, (None, None))
        return handler if service is not None else None

    def execute(self, command: str) -> None:
        """Run one command line, prompting on the console for any arguments."""
        handler = self._handler(command)
        if handler is None:
            self.console.puts(ERROR_COMMAND)
            return
        handler()

    def run(self) -> None:
        """Prompt for and execute commands until the console input ends."""
        try:
            while True:
                self._deliver_due()
                self.console.puts(PROMPT)
                self.execute(self.console.read_line())
        except EOFError:
            return

    def _ask(self, prompt: str) -> str:
        self.console.puts(prompt)
        return self.console.read_line()

    def _ask_number(self, prompt: str) -> int | None:
        try:
            return atoi(self._ask(prompt))
        except ValueError:
            self.console.puts(INVALID_NUMBER)
            return None

    def _ls(self) -> None:
        for name in list_names(self.archive):
            self.console.puts(name + "\n")

    def _cat(self) -> None:
        name = self._ask("Filename: ")
        try:
            data = read_file(self.archive, name)
        except ArchiveFileNotFound:
            self.console.puts("File not found!\n")
            return
        self.console.puts(data.decode("utf-8", "replace") + "\n")

    def _buddy_alloc(self) -> None:
        size = self._ask_number("size(KB): ")
        if size is None:
            return
        try:
            address = self.buddy.alloc(size)
        except AllocationError:
            self.console.puts("Can't find suitable node!\n")
            return
        self.console.puts(self.buddy.dump())
        self.console.puts(f"address: 0x{format_hex(address)}\n")

    def _buddy_free(self) -> None:
        index = self._ask_number("index: ")
        if index is None:
            return
        try:
            self.buddy.free(index)
        except (AllocationError, IndexError):
            self.console.puts("This node is not allocated!\n")
            return
        self.console.puts(self.buddy.dump())
        self.console.puts("\n")

    def _malloc(self) -> None:
        if isinstance(self.heap, BumpAllocator):
            size = self._ask_number("size: ")
            if size is None:
                return
            address = self.heap.alloc(size)
            self.console.puts(f"malloc_address = 0x{format_hex(address)}\n")
            return
        size = self._ask_number("size(B): ")
        if size is None:
            return
        address = self.heap.malloc(size)
        self._pointers.append(address)
        self.console.puts(f"index: {format_hex(len(self._pointers) - 1)}\n")
        self.console.puts(f"address: 0x{format_hex(address)}\n")

    def _free(self) -> None:
        if isinstance(self.heap, BumpAllocator):
            self.console.puts(ERROR_COMMAND)
            return
        index = self._ask_number("index: ")
        if index is None:
            return
        if index >= len(self._pointers) or self._pointers[index] is None:
            self.console.puts("invalid index\n")
            return
        self.heap.free(self._pointers[index])
        self._pointers[index] = None

    def _set_timeout(self) -> None:
        content = self._ask("MESSAGE: ")
        seconds = self._ask_number("SECONDS: ")
        if seconds is None:
            return
        self.timers.schedule(content, self.clock() + seconds)

    def _deliver_due(self) -> None:
        if self.timers is None:
            return
        while (deadline := self.timers.next_deadline()) is not None and deadline <= self.clock():
            self.console.puts(self.timers.expire().content + "\n")


def _build_buddy(pages: int) -> BuddyAllocator:
    limit = pages * PAGE_SIZE
    reserved = [(start, end) for start, end in DEFAULT_RESERVED if end <= limit]
    return BuddyAllocator(pages, reserved)


def main(argv: list[str] | None = None) -> int:
    """Start the shell on standard input and output."""
    parser = argparse.ArgumentParser(prog="minikernel", description="Run the kernel shell.")
    parser.add_argument("--archive", help="newc cpio archive to serve as the ramdisk")
    parser.add_argument("--pages", type=int, default=MAX_PAGES, help="number of managed pages")
    args = parser.parse_args(argv)

    archive = None
    if args.archive is not None:
        with open(args.archive, "rb") as stream:
            archive = stream.read()
    try:
        buddy = _build_buddy(args.pages)
    except ValueError as error:
        parser.error(str(error))
    shell = Shell(Console(sys.stdin, sys.stdout), archive, buddy, Heap(buddy), MessageQueue())
    shell.run()
    return 0