"""Per-sensor session configuration."""

from dataclasses import dataclass

from .rollup import HOUR_IN_SEC
from .watchdog import DEFAULT_OFFLINE_TIMEOUT

# Davis rain collector: 0.01 in (0.254 mm) per tip
DEFAULT_SPOON_MM = 0.254


@dataclass
class SensorConfig:
    """Configuration consumed by a SensorSession."""
    sensor_id: str = "davis"
    spoon: float = DEFAULT_SPOON_MM  # mm of rain per tip
    window_period: float = HOUR_IN_SEC  # seconds
    offline_timeout: float = DEFAULT_OFFLINE_TIMEOUT  # seconds
    rollup_interval: float = HOUR_IN_SEC  # seconds

    def __post_init__(self):
        for name in ("spoon", "window_period", "offline_timeout", "rollup_interval"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")

    @classmethod
    def from_dict(cls, data: dict) -> "SensorConfig":
        """Create config from dictionary."""
        return cls(
            sensor_id=str(data.get("sensor_id", "davis")),
            spoon=float(data.get("spoon", DEFAULT_SPOON_MM)),
            window_period=float(data.get("window_period", HOUR_IN_SEC)),
            offline_timeout=float(data.get("offline_timeout", DEFAULT_OFFLINE_TIMEOUT)),
            rollup_interval=float(data.get("rollup_interval", HOUR_IN_SEC)),
        )
