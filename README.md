# minikernel

A small simulated kernel for learning how the pieces of a bare-metal
system fit together, all in plain Python with no third-party dependencies:

- `minikernel.console` — `Console`, a character console over text streams
  that turns `\n` into `\r\n` on output and `\r` into `\n` on input, echoes
  what `read_line` reads, and writes values as eight upper-case hex digits;
  and `BufferedConsole`, an interrupt-style console whose input and output
  pass through ring buffers (`receive` feeds a character in, `transmit`
  takes the next one out).
- `minikernel.ringqueue` — `RingQueue`, a circular queue of `size` slots
  holding at most `size - 1` values; `push` drops the value and returns
  `False` when the queue is full, `pop` on an empty queue raises
  `IndexError`.
- `minikernel.cpio` — reads "newc" cpio archives: `iter_entries` yields
  `CpioEntry` records (`name`, `mode`, `data`), `list_names` and
  `read_file` build on it; a missing member raises `ArchiveFileNotFound`.
- `minikernel.buddy` — `BuddyAllocator`, a page-frame buddy allocator with
  one free list per order, reserved address ranges, splitting on `alloc`
  and buddy merging on `free`; failures raise `AllocationError`.
  `suitable_size` rounds a request in KB up to a block size.
- `minikernel.heap` — `Heap`, a first-fit small-block allocator with
  32-byte block headers, built on pages from a `BuddyAllocator`; and
  `BumpAllocator`, a pointer that only moves forward.
- `minikernel.timers` — `MessageQueue`, `Message`s kept in deadline order
  (equal deadlines keep arrival order).
- `minikernel.numbers` — `atoi`, `log2`, `pow2`, `hex_to_int` and
  `format_hex`.

## Installing

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## The shell

Installing the package provides a `minikernel` command that starts an
interactive shell on standard input and output:

```
minikernel
minikernel --archive initramfs.cpio --pages 1024
```

- `--archive PATH` — a newc cpio archive to serve as the ramdisk. Without
  it the `ls` and `cat` commands are unknown.
- `--pages N` — number of 4 KB pages the buddy allocator manages (a power
  of two; default 262144).

The shell prints a `# ` prompt and reads one command per line:

| Command  | What it does |
|----------|--------------|
| `ls`     | list the names in the archive |
| `cat`    | ask for a file name and print that file, or `File not found!` |
| `A`      | ask for a size in KB, allocate pages, print the free lists and the address |
| `D`      | ask for a page index and free the block starting there |
| `malloc` | ask for a size in bytes, allocate from the heap, print its index and address |
| `free`   | ask for an index returned by `malloc` and free that block |
| `st`     | ask for a message and a number of seconds, and schedule the message |

Anything else prints `Error command!`; a non-numeric answer where a number
is asked for prints `Invalid number!`. The shell ends when its input ends.

## What it does not do

Everything is simulated in memory. The package does not drive any real
hardware: there is no board information, no reboot command, and nothing
loads or runs a user program from the archive. Scheduled messages are not
delivered asynchronously — the shell prints any messages whose time has
come just before it shows the next prompt.

## Using the pieces directly

```python
from minikernel.buddy import BuddyAllocator
from minikernel.heap import Heap

buddy = BuddyAllocator(total_pages=64, reserved=[])
heap = Heap(buddy)
address = heap.malloc(100)
heap.free(address)
print(heap.dump())
```

```python
from minikernel.ringqueue import RingQueue

queue = RingQueue(4)
for byte in b"abc":
    queue.push(byte)
assert queue.full()
assert queue.pop() == ord("a")
```

```python
from minikernel.cpio import list_names, read_file

with open("initramfs.cpio", "rb") as handle:
    data = handle.read()
print(list_names(data))
print(read_file(data, "hello.txt"))  # bytes
```