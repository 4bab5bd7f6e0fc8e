"""Deferred callbacks for batching editor input.

The curses loop is single threaded, so a scheduled callback is just a
deadline the loop checks between key reads.
"""

from __future__ import annotations

import time
from typing import Callable, Protocol


class FlushScheduler(Protocol):
    """Runs at most one pending callback after a delay."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> None: ...

    def cancel(self) -> None: ...


class DeadlineScheduler:
    """FlushScheduler polled by the main loop.

    Scheduling while a callback is pending keeps the earlier deadline, so a
    burst of input is applied once, at most ``delay`` after it started.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._deadline: float | None = None
        self._callback: Callable[[], None] | None = None

    @property
    def pending(self) -> bool:
        return self._callback is not None

    def schedule(self, delay: float, callback: Callable[[], None]) -> None:
        if self._callback is None:
            self._deadline = self._clock() + delay
        self._callback = callback

    def cancel(self) -> None:
        self._deadline = None
        self._callback = None

    def run_due(self) -> bool:
        """Run the pending callback if its deadline passed. Returns True if it ran."""
        if self._callback is None or self._deadline is None:
            return False
        if self._clock() < self._deadline:
            return False
        callback = self._callback
        self.cancel()
        callback()
        return True

    def time_until_due(self) -> float | None:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())
