"""Request pacing for the dispatcher."""

from __future__ import annotations

import time
from typing import Callable


class Ticker:
    """Spaces out request releases by a fixed interval.

    A release is allowed once at least ``interval`` seconds have passed since
    the previous release, or since start() for the first one, like the first
    tick of a periodic timer. Releasing N requests therefore takes at least
    (N - 1) * interval seconds.
    """

    def __init__(self, interval: float, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize the ticker.

        Args:
            interval: Minimum number of seconds between two releases.
            clock: Monotonic clock returning seconds.

        Raises:
            ValueError: If interval is not positive.
        """
        if interval <= 0:
            raise ValueError('interval must be > 0.')
        self.interval = interval
        self._clock = clock
        self._last_tick: float | None = None

    def start(self) -> None:
        """Start counting the first interval from now."""
        self._last_tick = self._clock()

    def delay(self) -> float:
        """Return the number of seconds until the next release is allowed."""
        if self._last_tick is None:
            self.start()
        return max(0.0, self._last_tick + self.interval - self._clock())

    def mark(self) -> float:
        """Record a release happening now and return its timestamp."""
        self._last_tick = self._clock()
        return self._last_tick
