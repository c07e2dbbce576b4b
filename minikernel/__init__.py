"""A simulated teaching kernel: console, cpio reader, buddy allocator, heap, timers and shell."""

__version__ = "0.1.0"

__all__ = ["buddy", "console", "cpio", "heap", "numbers", "ringqueue", "shell", "timers"]