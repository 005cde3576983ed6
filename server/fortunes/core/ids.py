"""Identifier allocation for new fortunes."""

from __future__ import annotations


class IdAllocator:
    """Monotonic id counter.

    Not locked on its own: the store only touches it while holding the lock
    that also guards its mapping, so allocation and insertion stay atomic.
    """

    def __init__(self, start: int = 1) -> None:
        if start < 1:
            raise ValueError(f"start must be >= 1, got {start}")
        self._next = start

    def next_id(self) -> int:
        value = self._next
        self._next += 1
        return value

    def peek(self) -> int:
        """Return the id the next call to ``next_id`` will hand out."""
        return self._next

    def observe(self, existing_id: int) -> None:
        """Move the counter past an id that already exists elsewhere."""
        if existing_id >= self._next:
            self._next = existing_id + 1
