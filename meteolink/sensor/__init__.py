"""Sensor ingestion core: decoding, rain accumulation and availability."""

from .config import SensorConfig
from .decoder import (
    DecodeError,
    MalformedFieldError,
    UnknownTagError,
    decode,
    signal_strength,
    split_fields,
)
from .rollup import HourlyRollupScheduler
from .scheduling import Clock, Scheduler, SystemClock, TimerScheduler
from .session import SensorSession
from .watchdog import AvailabilityWatchdog, WatchdogState
from .window import WrappingCounterWindow

__all__ = [
    "SensorConfig",
    "DecodeError",
    "MalformedFieldError",
    "UnknownTagError",
    "decode",
    "signal_strength",
    "split_fields",
    "HourlyRollupScheduler",
    "Clock",
    "Scheduler",
    "SystemClock",
    "TimerScheduler",
    "SensorSession",
    "AvailabilityWatchdog",
    "WatchdogState",
    "WrappingCounterWindow",
]
