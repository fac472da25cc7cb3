"""Configuration loading for the meteolink bridge."""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

from meteolink.sensor.config import SensorConfig
from meteolink.shared.config import get_config_path, get_log_level, load_yaml_config
from meteolink.shared.mqtt import MQTTConfig

logger = logging.getLogger(__name__)


@dataclass
class BridgeConfig:
    """Main configuration."""
    mqtt: MQTTConfig = field(default_factory=MQTTConfig)
    sensor: SensorConfig = field(default_factory=SensorConfig)
    source: str = "-"  # path to the line source, "-" for stdin
    topic_prefix: str = "weather"
    reconnect_delay: float = 5.0  # seconds
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, data: dict) -> "BridgeConfig":
        """Create config from dictionary."""
        return cls(
            mqtt=MQTTConfig.from_dict(data.get("mqtt", {})),
            sensor=SensorConfig.from_dict(data.get("sensor", {})),
            source=data.get("source", "-"),
            topic_prefix=data.get("topic_prefix", "weather"),
            reconnect_delay=float(data.get("reconnect_delay", 5.0)),
            log_level=get_log_level(data),
        )

    @property
    def sensor_topic(self) -> str:
        """Topic prefix for the configured sensor, e.g. weather/davis."""
        return f"{self.topic_prefix}/{self.sensor.sensor_id}"


def load_config(config_path: Optional[str] = None) -> BridgeConfig:
    """Load configuration from YAML file or environment.

    Args:
        config_path: Path to YAML config file. If not provided,
                    looks for METEOLINK_CONFIG env var, then for
                    config/bridge.yaml at the repo root, then falls back
                    to defaults.

    Returns:
        BridgeConfig instance.
    """
    if config_path is None:
        config_path = os.environ.get("METEOLINK_CONFIG") or str(
            get_config_path("bridge.yaml")
        )

    if os.path.exists(config_path):
        return BridgeConfig.from_dict(load_yaml_config(config_path))

    logger.info(f"No config file at {config_path}, using defaults")

    # Environment variable overrides
    config = BridgeConfig()

    if source := os.environ.get("METEOLINK_SOURCE"):
        config.source = source
    if mqtt_broker := os.environ.get("MQTT_BROKER"):
        config.mqtt.broker = mqtt_broker
    if log_level := os.environ.get("LOG_LEVEL"):
        config.log_level = log_level.upper()

    return config
