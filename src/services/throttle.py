"""Minimum-interval limiter for outbound model calls."""

from __future__ import annotations

import threading
import time
from typing import Callable


class Throttle:
    """Space successive ``wait()`` returns at least ``interval`` seconds apart.

    The first call never blocks. ``clock`` and ``sleep`` are injectable so
    tests can run without real delays.
    """

    def __init__(
        self,
        interval: float,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if interval < 0:
            raise ValueError("interval must be >= 0")
        self.interval = interval
        self._clock = clock
        self._sleep = sleep
        self._last: float | None = None
        self._lock = threading.Lock()

    def wait(self) -> float:
        """Block until the next call is allowed; return seconds slept."""
        with self._lock:
            slept = 0.0
            now = self._clock()
            if self._last is not None:
                remaining = self._last + self.interval - now
                if remaining > 0:
                    self._sleep(remaining)
                    slept = remaining
                    now = self._clock()
            self._last = now
            return slept
