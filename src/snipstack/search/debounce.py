"""Latest-wins debouncer for search input."""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

DEBOUNCE_MS: int = 300


@dataclass(frozen=True)
class _Pending(Generic[T]):
    value: T
    due: float


class Debouncer(Generic[T]):
    """Hold the most recent submitted value until it has been quiet for ``delay_ms``.

    Submitting a new value supersedes the pending one; superseded values are
    dropped, never queued. Times are seconds on a monotonic clock.
    """

    def __init__(self, delay_ms: int = DEBOUNCE_MS) -> None:
        self.delay = delay_ms / 1000.0
        self._pending: _Pending[T] | None = None
        self.superseded = 0

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def submit(self, value: T, now: float | None = None) -> None:
        now = time.monotonic() if now is None else now
        if self._pending is not None:
            self.superseded += 1
        self._pending = _Pending(value, now + self.delay)

    def poll(self, now: float | None = None) -> T | None:
        """Return the pending value once its delay has elapsed, else None."""
        now = time.monotonic() if now is None else now
        if self._pending is None or now < self._pending.due:
            return None
        value = self._pending.value
        self._pending = None
        return value

    def flush(self) -> T | None:
        """Return the pending value immediately, regardless of delay."""
        if self._pending is None:
            return None
        value = self._pending.value
        self._pending = None
        return value
