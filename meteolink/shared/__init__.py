"""Shared utilities for meteolink services."""

from .models import (
    AvailabilityState,
    RainReading,
    SensorReading,
    SolarReading,
    StatePublisher,
    TemperatureReading,
    WindReading,
)
from .config import get_config_path, get_log_level, load_yaml_config
from .mqtt import MQTTConfig
from .logging import setup_logging

__all__ = [
    "AvailabilityState",
    "RainReading",
    "SensorReading",
    "SolarReading",
    "StatePublisher",
    "TemperatureReading",
    "WindReading",
    "load_yaml_config",
    "get_config_path",
    "get_log_level",
    "MQTTConfig",
    "setup_logging",
]
