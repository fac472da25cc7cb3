"""Hour-aligned periodic recomputation of a derived metric."""

import logging
from typing import Callable, Optional

from .scheduling import Clock, ScheduledTask, Scheduler

logger = logging.getLogger(__name__)

HOUR_IN_SEC = 3600


class HourlyRollupScheduler:
    """Recomputes and publishes a value at every interval boundary.

    The first run is delayed until the next wall-clock boundary (the top of
    the hour with the default interval), then repeats with a fixed delay
    whether or not new samples arrived.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        clock: Clock,
        compute: Callable[[], float],
        publish: Callable[[float], None],
        interval: float = HOUR_IN_SEC,
    ):
        self.scheduler = scheduler
        self.clock = clock
        self.compute = compute
        self.publish = publish
        self.interval = interval
        self._task: Optional[ScheduledTask] = None

    def initial_delay(self) -> float:
        """Seconds from now until the next interval boundary."""
        interval_ms = int(self.interval * 1000)
        return self.interval - (self.clock.now_ms() % interval_ms) / 1000

    def start(self) -> None:
        """Start (or restart) the hour-aligned schedule."""
        self.stop()
        start = self.initial_delay()
        logger.debug(f"First rollup in {start:.1f}s, then every {self.interval}s")
        self._task = self.scheduler.schedule_with_fixed_delay(
            self._run, start, self.interval
        )

    def stop(self) -> None:
        """Cancel the schedule without waiting for a run in progress."""
        if self._task is not None:
            self._task.cancel()
            self._task = None

    @property
    def running(self) -> bool:
        return self._task is not None

    def _run(self) -> None:
        value = self.compute()
        logger.debug(f"Rollup computed {value}")
        self.publish(value)
