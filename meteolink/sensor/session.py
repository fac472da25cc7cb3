"""Sensor session: turns framed reports into published metrics and availability."""

import logging
import threading
from datetime import datetime
from typing import Optional, Sequence

from meteolink.shared.models import (
    AvailabilityState,
    MetricValue,
    RainReading,
    SensorReading,
    SolarReading,
    StatePublisher,
    TemperatureReading,
    WindReading,
)
from .config import SensorConfig
from .decoder import DecodeError, decode
from .rollup import HourlyRollupScheduler
from .scheduling import Clock, Scheduler, SystemClock, TimerScheduler
from .watchdog import AvailabilityWatchdog
from .window import WrappingCounterWindow

logger = logging.getLogger(__name__)

CHANNEL_RAIN_RAW = "rain_raw"
CHANNEL_RAIN_CURRENTHOUR = "rain_currenthour"
CHANNEL_RAIN_LASTHOUR = "rain_lasthour"
CHANNEL_WIND_SPEED = "wind_speed"
CHANNEL_WIND_DIRECTION = "wind_direction"
CHANNEL_OUTDOOR_TEMPERATURE = "outdoor_temperature"
CHANNEL_HUMIDITY = "humidity"
CHANNEL_SOLAR_POWER = "solar_power"
CHANNEL_SIGNAL_STRENGTH = "signal_strength"
CHANNEL_LOW_BATTERY = "low_battery"

BRIDGE_OFFLINE_DETAIL = "Bridge offline"


class SensorSession:
    """Owns the rain window, the offline watchdog and the hourly rollup.

    The owning process drives it through start(), on_reading(),
    on_bridge_status() and dispose(). Window, watchdog and availability are
    mutated under a single re-entrant lock, which the watchdog shares so that
    re-arming cannot race with a reading or with dispose().
    """

    def __init__(
        self,
        config: SensorConfig,
        publisher: StatePublisher,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Clock] = None,
    ):
        self.config = config
        self.publisher = publisher
        self.clock = clock or SystemClock()
        self.scheduler = scheduler or TimerScheduler()

        self._lock = threading.RLock()
        self.window = WrappingCounterWindow(config.window_period, self.clock)
        self.watchdog = AvailabilityWatchdog(
            self.scheduler,
            self._on_watchdog_timeout,
            timeout=config.offline_timeout,
            lock=self._lock,
        )
        self.rollup = HourlyRollupScheduler(
            self.scheduler,
            self.clock,
            compute=self.rainfall,
            publish=self._publish_last_hour,
            interval=config.rollup_interval,
        )

        self._availability = AvailabilityState.UNKNOWN
        self._availability_detail: Optional[str] = None
        self._last_data: Optional[datetime] = None
        self._bridge_online: Optional[bool] = None
        self._disposed = False

    @property
    def availability(self) -> AvailabilityState:
        return self._availability

    @property
    def availability_detail(self) -> Optional[str]:
        return self._availability_detail

    @property
    def last_data(self) -> Optional[datetime]:
        return self._last_data

    def rainfall(self) -> float:
        """Rain in mm over the current window."""
        return self.window.total() * self.config.spoon

    def start(self) -> None:
        """Publish the initial UNKNOWN state and start the hourly rollup."""
        with self._lock:
            if self._disposed:
                logger.debug(f"Session {self.config.sensor_id} disposed, not starting")
                return

            logger.debug(
                f"Starting session {self.config.sensor_id}, spoon size {self.config.spoon} mm"
            )
            self._publish_availability(AvailabilityState.UNKNOWN, None)
            self.rollup.start()

    def on_reading(self, fields: Sequence[str]) -> Optional[SensorReading]:
        """Handle one framed report.

        Returns:
            The decoded reading, or None if it was dropped.
        """
        with self._lock:
            if self._disposed:
                logger.debug(f"Session {self.config.sensor_id} disposed, ignoring {list(fields)}")
                return None

            try:
                reading = decode(fields)
            except DecodeError as e:
                logger.warning(f"Dropping report {list(fields)}: {e}")
                return None

            logger.debug(f"Sensor {self.config.sensor_id} received: {reading}")
            self._last_data = self.clock.now()

            if self._bridge_online is False:
                logger.debug("Bridge offline, not re-arming watchdog")
            else:
                self._set_availability(AvailabilityState.ONLINE)
                self.watchdog.arm(self._last_data)

            self._publish_reading(reading)
            return reading

    def on_bridge_status(self, online: bool) -> None:
        """React to the bridge (line source) going online or offline."""
        with self._lock:
            if self._disposed:
                return

            logger.debug(f"Sensor {self.config.sensor_id}: bridge online={online}")
            self._bridge_online = online

            if not online:
                self.watchdog.cancel()
                self._set_availability(AvailabilityState.OFFLINE, BRIDGE_OFFLINE_DETAIL)
                return

            # Put the sensor online and start the "no data" timer
            self._set_availability(AvailabilityState.ONLINE)
            self.watchdog.arm(self._last_data)

    def dispose(self) -> None:
        """Cancel all timers. Safe to call more than once."""
        with self._lock:
            self._disposed = True
            self.rollup.stop()
            self.watchdog.cancel()

    def _on_watchdog_timeout(self, detail: str) -> None:
        with self._lock:
            self._set_availability(AvailabilityState.OFFLINE, detail)

    def _set_availability(
        self, state: AvailabilityState, detail: Optional[str] = None
    ) -> None:
        if state is self._availability and detail == self._availability_detail:
            return

        logger.info(
            f"Sensor {self.config.sensor_id} availability: "
            f"{self._availability.value} -> {state.value}"
            + (f" ({detail})" if detail else "")
        )
        self._availability = state
        self._availability_detail = detail
        self._publish_availability(state, detail)

    def _publish_availability(
        self, state: AvailabilityState, detail: Optional[str]
    ) -> None:
        try:
            self.publisher.publish_availability(state, detail)
        except Exception as e:
            logger.error(f"Failed to publish availability {state.value}: {e}")

    def _publish(self, channel: str, value: MetricValue, unit: str) -> None:
        try:
            self.publisher.publish_metric(channel, value, unit)
        except Exception as e:
            logger.error(f"Failed to publish {channel}={value}: {e}")

    def _publish_last_hour(self, rainfall: float) -> None:
        self._publish(CHANNEL_RAIN_LASTHOUR, rainfall, "mm")

    def _publish_signal(self, reading: SensorReading) -> None:
        self._publish(CHANNEL_SIGNAL_STRENGTH, reading.signal_strength, "bars")
        self._publish(CHANNEL_LOW_BATTERY, reading.battery_low, "state")

    def _publish_reading(self, reading: SensorReading) -> None:
        if isinstance(reading, RainReading):
            self._publish(CHANNEL_RAIN_RAW, reading.counter, "count")
            self._publish_signal(reading)

            self.window.put(reading.counter)
            self._publish(CHANNEL_RAIN_CURRENTHOUR, self.rainfall(), "mm")

        elif isinstance(reading, WindReading):
            self._publish(CHANNEL_WIND_SPEED, reading.speed_ms, "m/s")
            self._publish(CHANNEL_WIND_DIRECTION, reading.direction_deg, "deg")
            self._publish_signal(reading)

        elif isinstance(reading, TemperatureReading):
            self._publish(CHANNEL_OUTDOOR_TEMPERATURE, round(reading.celsius, 1), "C")
            self._publish(CHANNEL_HUMIDITY, round(reading.humidity_pct, 1), "%")
            self._publish_signal(reading)

        elif isinstance(reading, SolarReading):
            self._publish(CHANNEL_SOLAR_POWER, round(reading.power, 1), "")
            self._publish_signal(reading)
