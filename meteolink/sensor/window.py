"""Sliding time window over an 8-bit wrapping tip counter."""

import threading
from typing import Dict

from .scheduling import Clock

COUNTER_MODULUS = 256


class WrappingCounterWindow:
    """Keeps raw counter samples for a fixed period and reports the net change.

    total() compares the earliest retained sample against each later one and
    keeps only the last comparison, so the result is the delta between the
    oldest and newest samples in the window. It assumes the counter wraps at
    most once within the window; a window holding several samples across a
    wrap is not summed pairwise.
    """

    def __init__(self, period: float, clock: Clock):
        """Initialize an empty window.

        Args:
            period: Window length in seconds.
            clock: Source of sample timestamps.
        """
        self.period_ms = int(period * 1000)
        self.clock = clock
        self._samples: Dict[int, int] = {}
        self._lock = threading.Lock()

    def put(self, value: int) -> None:
        """Record a counter value at the current time."""
        with self._lock:
            self._samples[self.clock.now_ms()] = value

    def total(self) -> int:
        """Evict expired samples and return the net tips across the window."""
        with self._lock:
            oldest_allowed = self.clock.now_ms() - self.period_ms
            least = None
            total = 0

            for timestamp in sorted(self._samples):
                if timestamp < oldest_allowed:
                    del self._samples[timestamp]
                    continue

                value = self._samples[timestamp]
                if least is None:
                    least = value
                    continue

                if value < least:
                    total = COUNTER_MODULUS - least + value
                else:
                    total = value - least

            return total

    def __len__(self) -> int:
        with self._lock:
            return len(self._samples)
