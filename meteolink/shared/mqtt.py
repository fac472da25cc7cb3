"""MQTT configuration and payload helpers."""

import json
import time
from dataclasses import dataclass
from typing import Optional, Union


@dataclass
class MQTTConfig:
    """MQTT broker configuration."""
    broker: str = "localhost"
    port: int = 1883
    client_id: str = "meteolink-bridge"
    keepalive: int = 60
    qos: int = 1

    @classmethod
    def from_dict(cls, data: dict) -> "MQTTConfig":
        """Create config from dictionary."""
        return cls(
            broker=data.get("broker", "localhost"),
            port=data.get("port", 1883),
            client_id=data.get("client_id", "meteolink-bridge"),
            keepalive=data.get("keepalive", 60),
            qos=data.get("qos", 1),
        )


def create_sensor_payload(
    value: Union[float, int, bool],
    unit: str,
    sensor_id: str,
    timestamp: Optional[float] = None,
) -> str:
    """Create a standardized MQTT payload for a derived metric.

    Args:
        value: The metric value.
        unit: Unit of measurement (e.g., 'mm', 'C').
        sensor_id: Identifier for the sensor.
        timestamp: Unix timestamp (defaults to current time).

    Returns:
        JSON string payload.
    """
    return json.dumps({
        "value": value,
        "unit": unit,
        "ts": timestamp or time.time(),
        "sensor": sensor_id,
    })


def create_availability_payload(
    state: str,
    detail: Optional[str] = None,
    timestamp: Optional[float] = None,
) -> str:
    """Create the payload published on an availability transition."""
    return json.dumps({
        "state": state,
        "detail": detail,
        "ts": timestamp or time.time(),
    })
