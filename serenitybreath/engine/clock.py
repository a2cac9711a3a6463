"""Session stopwatch: monotonic, pausable, no background thread.

Elapsed time is always ``now - adjusted_start`` rather than a counter
bumped on every tick, so any number of pause/resume cycles leaves it in
step with the wall clock.
"""

from __future__ import annotations

import time
from typing import Callable


class SessionClock:
    """Pausable elapsed-time counter for a whole breathing session."""

    def __init__(self, time_source: Callable[[], float] = time.monotonic) -> None:
        self._now = time_source
        self._running = False
        self._start: float | None = None   # adjusted start, seconds
        self._elapsed_ms = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def elapsed_ms(self) -> int:
        if self._running:
            return self._compute()
        return self._elapsed_ms

    def start(self, base_ms: int = 0) -> None:
        """Begin counting, carrying over *base_ms* already elapsed."""
        self._elapsed_ms = max(0, base_ms)
        self._start = self._now() - self._elapsed_ms / 1000
        self._running = True

    def resume(self) -> None:
        """Continue from the frozen value after a ``pause()``."""
        if self._running:
            return
        self.start(self._elapsed_ms)

    def pause(self) -> None:
        if not self._running:
            return
        self._elapsed_ms = self._compute()
        self._running = False
        self._start = None

    def reset(self) -> None:
        self._running = False
        self._start = None
        self._elapsed_ms = 0

    def tick(self) -> int:
        """Recompute elapsed time from the wall clock and return it."""
        if self._running:
            self._elapsed_ms = self._compute()
        return self._elapsed_ms

    def _compute(self) -> int:
        return max(0, round((self._now() - self._start) * 1000))
