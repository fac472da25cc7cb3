"""Deterministic clock, scheduler and publisher doubles for tests."""

from typing import Callable, List, Optional, Tuple

from meteolink.sensor.scheduling import Clock, ScheduledTask, Scheduler
from meteolink.shared.models import AvailabilityState, MetricValue, StatePublisher

# 1_699_999_200_000 ms is an exact multiple of one hour
HOUR_BASE_MS = 1_699_999_200_000


class FakeClock(Clock):
    def __init__(self, start_ms: int = HOUR_BASE_MS):
        self._now_ms = start_ms

    def now_ms(self) -> int:
        return self._now_ms

    def set_ms(self, value: int) -> None:
        self._now_ms = value

    def advance(self, seconds: float) -> None:
        self._now_ms += round(seconds * 1000)


class ManualTask(ScheduledTask):
    def __init__(self, fn: Callable[[], None], due_ms: int, repeat: Optional[float]):
        self.fn = fn
        self.due_ms = due_ms
        self.repeat = repeat
        self.done = False
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """Runs tasks only when advance() moves virtual time past their deadline."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.tasks: List[ManualTask] = []

    def schedule(self, delay: float, fn: Callable[[], None]) -> ManualTask:
        task = ManualTask(fn, self.clock.now_ms() + round(delay * 1000), None)
        self.tasks.append(task)
        return task

    def schedule_with_fixed_delay(
        self, fn: Callable[[], None], initial_delay: float, delay: float
    ) -> ManualTask:
        task = ManualTask(fn, self.clock.now_ms() + round(initial_delay * 1000), delay)
        self.tasks.append(task)
        return task

    @property
    def pending(self) -> List[ManualTask]:
        return [t for t in self.tasks if not t.cancelled and not t.done]

    def advance(self, seconds: float) -> None:
        target = self.clock.now_ms() + round(seconds * 1000)
        while True:
            due = [t for t in self.pending if t.due_ms <= target]
            if not due:
                break
            task = min(due, key=lambda t: t.due_ms)
            self.clock.set_ms(max(task.due_ms, self.clock.now_ms()))
            if task.repeat is None:
                task.done = True
            else:
                task.due_ms += round(task.repeat * 1000)
            task.fn()
        self.clock.set_ms(target)


class RecordingPublisher(StatePublisher):
    def __init__(self):
        self.metrics: List[Tuple[str, MetricValue, str]] = []
        self.availability: List[Tuple[AvailabilityState, Optional[str]]] = []

    def publish_metric(self, channel: str, value: MetricValue, unit: str) -> None:
        self.metrics.append((channel, value, unit))

    def publish_availability(
        self, state: AvailabilityState, detail: Optional[str] = None
    ) -> None:
        self.availability.append((state, detail))

    def values(self, channel: str) -> List[MetricValue]:
        return [value for name, value, _ in self.metrics if name == channel]
