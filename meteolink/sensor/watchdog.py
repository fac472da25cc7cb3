"""Re-armable "no data" timer for a sensor session."""

import logging
import threading
from datetime import datetime
from enum import Enum
from typing import Callable, Optional

from .scheduling import ScheduledTask, Scheduler

logger = logging.getLogger(__name__)

DEFAULT_OFFLINE_TIMEOUT = 90.0


class WatchdogState(Enum):
    IDLE = "idle"
    ARMED = "armed"
    FIRED = "fired"


class AvailabilityWatchdog:
    """Calls on_timeout if arm() is not called again within the timeout.

    At most one deadline is outstanding. arm() cancels the pending deadline
    and schedules a new one under the lock; each arm bumps a generation so a
    timer that already started running for an older deadline does nothing.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        on_timeout: Callable[[str], None],
        timeout: float = DEFAULT_OFFLINE_TIMEOUT,
        lock: Optional[threading.RLock] = None,
    ):
        """Initialize an idle watchdog.

        Args:
            scheduler: Scheduler used for the deadline.
            on_timeout: Called with a human-readable reason when it fires.
            timeout: Default seconds between arm() and firing.
            lock: Lock shared with the owner so arming and the owner's state
                changes happen in one exclusion scope. A private lock is
                created if omitted.
        """
        self.scheduler = scheduler
        self.on_timeout = on_timeout
        self.timeout = timeout
        self._lock = lock or threading.RLock()
        self._task: Optional[ScheduledTask] = None
        self._generation = 0
        self._state = WatchdogState.IDLE
        self._last_data: Optional[datetime] = None

    @property
    def state(self) -> WatchdogState:
        return self._state

    def arm(
        self,
        last_data: Optional[datetime] = None,
        timeout: Optional[float] = None,
    ) -> None:
        """Cancel any pending deadline and start a new one.

        Args:
            last_data: Time of the last successful reading, used in the
                reason reported on expiry.
            timeout: Seconds until expiry; defaults to self.timeout.
        """
        with self._lock:
            self._cancel_task()
            self._generation += 1
            generation = self._generation
            self._last_data = last_data
            self._state = WatchdogState.ARMED
            self._task = self.scheduler.schedule(
                self.timeout if timeout is None else timeout,
                lambda: self._fire(generation),
            )

    def cancel(self) -> None:
        """Return to idle and drop any pending or in-flight expiry."""
        with self._lock:
            self._cancel_task()
            self._generation += 1
            self._state = WatchdogState.IDLE

    def _cancel_task(self) -> None:
        if self._task is not None:
            self._task.cancel()
            self._task = None

    def _fire(self, generation: int) -> None:
        with self._lock:
            if generation != self._generation or self._state is not WatchdogState.ARMED:
                logger.debug("Ignoring stale watchdog expiry")
                return

            self._task = None
            self._state = WatchdogState.FIRED

            if self._last_data is None:
                detail = "No data received"
            else:
                detail = f"No data received since {self._last_data.isoformat()}"

            logger.warning(f"Watchdog expired: {detail}")
            self.on_timeout(detail)
