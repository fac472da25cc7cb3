import pytest

from tests.fakes import FakeClock, ManualScheduler, RecordingPublisher


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock) -> ManualScheduler:
    return ManualScheduler(clock)


@pytest.fixture
def publisher() -> RecordingPublisher:
    return RecordingPublisher()
