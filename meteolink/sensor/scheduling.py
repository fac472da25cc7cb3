"""Clock and timer abstractions used by the sensor session.

The session never sleeps or reads the time directly; it goes through a
Clock and a Scheduler so the service can run on real timer threads and the
tests on virtual time.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Clock(ABC):
    """Wall clock in epoch milliseconds."""

    @abstractmethod
    def now_ms(self) -> int:
        """Return current time in milliseconds since the epoch."""
        pass

    def now(self) -> datetime:
        """Return current time as a local datetime."""
        return datetime.fromtimestamp(self.now_ms() / 1000)


class SystemClock(Clock):
    def now_ms(self) -> int:
        return int(time.time() * 1000)


class ScheduledTask(ABC):
    """Handle for a scheduled callback."""

    @abstractmethod
    def cancel(self) -> None:
        """Cancel future runs. Never blocks; cancelling twice is a no-op."""
        pass

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        pass


class Scheduler(ABC):
    """Runs callbacks after a delay, once or repeatedly."""

    @abstractmethod
    def schedule(self, delay: float, fn: Callable[[], None]) -> ScheduledTask:
        """Run fn once after delay seconds."""
        pass

    @abstractmethod
    def schedule_with_fixed_delay(
        self, fn: Callable[[], None], initial_delay: float, delay: float
    ) -> ScheduledTask:
        """Run fn after initial_delay seconds, then every delay seconds."""
        pass


def _run_safely(fn: Callable[[], None]) -> None:
    try:
        fn()
    except Exception as e:
        logger.error(f"Scheduled task {getattr(fn, '__name__', fn)} failed: {e}")


class _TimerTask(ScheduledTask):
    """A one-shot or fixed-delay task backed by threading.Timer."""

    def __init__(self, fn: Callable[[], None], repeat: Optional[float] = None):
        self._fn = fn
        self._repeat = repeat
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._cancelled = False

    def start(self, delay: float) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._timer = threading.Timer(max(delay, 0.0), self._run)
            self._timer.daemon = True
            self._timer.start()

    def _run(self) -> None:
        if self._cancelled:
            return
        _run_safely(self._fn)
        if self._repeat is not None:
            self.start(self._repeat)

    def cancel(self) -> None:
        with self._lock:
            self._cancelled = True
            if self._timer is not None:
                # Timer.cancel does not wait for a callback already running
                self._timer.cancel()
                self._timer = None

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class TimerScheduler(Scheduler):
    """Scheduler running each task on a daemon threading.Timer."""

    def schedule(self, delay: float, fn: Callable[[], None]) -> ScheduledTask:
        task = _TimerTask(fn)
        task.start(delay)
        return task

    def schedule_with_fixed_delay(
        self, fn: Callable[[], None], initial_delay: float, delay: float
    ) -> ScheduledTask:
        task = _TimerTask(fn, repeat=delay)
        task.start(initial_delay)
        return task
