"""Single-slot, latest-wins hand-off between the meter worker and a consumer."""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

T = TypeVar('T')


class LatestSlot(Generic[T]):
    """Holds at most one pending value; a new put() supersedes the previous one."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._value: T | None = None
        self._dropped = 0

    def put(self, value: T) -> None:
        with self._lock:
            if self._value is not None:
                self._dropped += 1
            self._value = value

    def take(self) -> T | None:
        """Return the pending value and clear the slot (None when empty)."""
        with self._lock:
            value, self._value = self._value, None
            return value

    def peek(self) -> T | None:
        with self._lock:
            return self._value

    @property
    def dropped(self) -> int:
        """Number of values superseded before anyone took them."""
        with self._lock:
            return self._dropped
