"""Line source to MQTT bridge - main orchestrator."""

import contextlib
import logging
import signal
import sys
import threading
from typing import Iterable, Optional

from meteolink.sensor.decoder import split_fields
from meteolink.sensor.scheduling import Clock, Scheduler
from meteolink.sensor.session import SensorSession
from meteolink.shared.models import StatePublisher
from .config import BridgeConfig, load_config
from .mqtt_publisher import MQTTPublisher

logger = logging.getLogger(__name__)


class MeteoBridge:
    """Feeds report lines from a text source into a SensorSession."""

    def __init__(
        self,
        config: BridgeConfig,
        publisher: StatePublisher,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize the bridge service.

        Args:
            config: Configuration object.
            publisher: Sink for the session's metrics and availability.
            scheduler: Timer scheduler, defaults to real timers.
            clock: Clock, defaults to the system clock.
        """
        self.config = config
        self.session = SensorSession(config.sensor, publisher, scheduler, clock)
        self._running = False
        self._stop_event = threading.Event()

    def process_line(self, line: str) -> None:
        """Frame one raw line and hand it to the session."""
        fields = split_fields(line)
        if not fields:
            return
        self.session.on_reading(fields)

    def feed(self, lines: Iterable[str]) -> None:
        """Report the bridge online, process lines until exhausted, then offline."""
        self.session.on_bridge_status(True)
        try:
            for line in lines:
                if self._stop_event.is_set():
                    break
                self.process_line(line)
        finally:
            self.session.on_bridge_status(False)

    def _open_source(self):
        if self.config.source == "-":
            return contextlib.nullcontext(sys.stdin)
        return open(self.config.source, "r")

    def _setup_signal_handlers(self):
        """Set up signal handlers for graceful shutdown."""
        def signal_handler(signum, frame):
            signame = signal.Signals(signum).name
            logger.info(f"Received {signame}, shutting down...")
            self.stop()
            raise KeyboardInterrupt

        signal.signal(signal.SIGTERM, signal_handler)
        signal.signal(signal.SIGINT, signal_handler)

    def run(self):
        """Run the bridge (blocking) until stopped or stdin closes."""
        self._setup_signal_handlers()
        self._running = True
        self.session.start()

        try:
            while not self._stop_event.is_set():
                try:
                    with self._open_source() as stream:
                        logger.info(f"Reading reports from {self.config.source}")
                        self.feed(stream)
                    logger.warning(f"Line source {self.config.source} closed")
                except OSError as e:
                    logger.warning(f"Error reading {self.config.source}: {e}")
                    self.session.on_bridge_status(False)

                if self.config.source == "-":
                    break

                logger.info(
                    f"Reopening {self.config.source} in {self.config.reconnect_delay}s..."
                )
                self._stop_event.wait(self.config.reconnect_delay)
        except KeyboardInterrupt:
            pass
        finally:
            self.stop()

    def stop(self):
        """Stop the run loop and cancel the session timers."""
        self._running = False
        self._stop_event.set()
        self.session.dispose()

    @property
    def is_running(self) -> bool:
        return self._running


def run_bridge(config_path: Optional[str] = None):
    """Run the meteolink bridge service.

    Args:
        config_path: Optional path to config file.
    """
    config = load_config(config_path)

    logger.info("Starting meteolink bridge...")

    publisher = MQTTPublisher(config.mqtt, config.sensor_topic, config.sensor.sensor_id)
    if not publisher.connect():
        logger.error("Failed to connect to MQTT broker")
        sys.exit(1)

    bridge = MeteoBridge(config, publisher)

    try:
        bridge.run()
    except Exception as e:
        logger.error(f"Error: {e}")
        sys.exit(1)
    finally:
        publisher.disconnect()
        logger.info("Meteolink bridge stopped.")
