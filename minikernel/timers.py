"""Queue of timed messages ordered by deadline."""

from __future__ import annotations

from bisect import insort_right
from collections.abc import Iterator
from dataclasses import dataclass
from operator import attrgetter


@dataclass(frozen=True)
class Message:
    """A message to print once the counter reaches ``deadline``."""

    content: str
    deadline: int


class MessageQueue:
    """Messages kept in deadline order; equal deadlines keep arrival order."""

    def __init__(self) -> None:
        self._messages: list[Message] = []

    def schedule(self, content: str, deadline: int) -> Message:
        """Insert a message and return it."""
        if deadline < 0:
            raise ValueError(f"negative deadline: {deadline}")
        message = Message(content=content, deadline=deadline)
        insort_right(self._messages, message, key=attrgetter("deadline"))
        return message

    def expire(self) -> Message:
        """Remove and return the message with the earliest deadline."""
        if not self._messages:
            raise IndexError("no scheduled messages")
        return self._messages.pop(0)

    def next_deadline(self) -> int | None:
        """Deadline of the earliest message, or None when the timer should stop."""
        return self._messages[0].deadline if self._messages else None

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[Message]:
        return iter(list(self._messages))