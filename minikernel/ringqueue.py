"""Bounded circular queue that drops values pushed while it is full."""

from __future__ import annotations

from collections import deque
from typing import Any

QUEUE_MAX_SIZE = 2048


class RingQueue:
    """A circular queue of ``size`` slots, of which ``size - 1`` hold values."""

    def __init__(self, size: int) -> None:
        if not 1 <= size <= QUEUE_MAX_SIZE:
            raise ValueError(f"queue size must be between 1 and {QUEUE_MAX_SIZE}: {size}")
        self.size = size
        self._items: deque[Any] = deque()

    @property
    def capacity(self) -> int:
        return self.size - 1

    def empty(self) -> bool:
        return not self._items

    def full(self) -> bool:
        return len(self._items) >= self.capacity

    def push(self, value: Any) -> bool:
        """Append ``value``; return False if the queue was full and it was dropped."""
        if self.full():
            return False
        self._items.append(value)
        return True

    def pop(self) -> Any:
        """Remove and return the oldest value."""
        if not self._items:
            raise IndexError("pop from an empty queue")
        return self._items.popleft()

    def __len__(self) -> int:
        return len(self._items)