"""Core data models for decoded sensor reports."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union


@dataclass(frozen=True)
class SensorReading:
    """Fields common to every report from the transmitter.

    signal_dbm is the raw RSSI from the line, signal_strength its 0-4 bar
    classification. battery_low is inferred from the field count of the line.
    """
    signal_dbm: float
    signal_strength: int
    battery_low: bool


@dataclass(frozen=True)
class RainReading(SensorReading):
    """Raw 8-bit tip counter from the rain gauge."""
    counter: int


@dataclass(frozen=True)
class WindReading(SensorReading):
    speed_ms: float
    direction_deg: int


@dataclass(frozen=True)
class TemperatureReading(SensorReading):
    celsius: float
    humidity_pct: float


@dataclass(frozen=True)
class SolarReading(SensorReading):
    power: float


class AvailabilityState(Enum):
    """Availability of a sensor as seen by its session."""
    UNKNOWN = "unknown"
    ONLINE = "online"
    OFFLINE = "offline"


MetricValue = Union[float, int, bool]


class StatePublisher(ABC):
    """Sink for derived metrics and availability transitions."""

    @abstractmethod
    def publish_metric(self, channel: str, value: MetricValue, unit: str) -> None:
        """Publish a derived metric value on a logical channel."""
        pass

    @abstractmethod
    def publish_availability(
        self, state: AvailabilityState, detail: Optional[str] = None
    ) -> None:
        """Publish an availability transition with an optional reason."""
        pass
