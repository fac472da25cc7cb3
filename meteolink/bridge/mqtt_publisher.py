"""MQTT publisher for derived sensor metrics."""

import logging
import threading
from typing import Optional

import paho.mqtt.client as mqtt
from paho.mqtt.enums import CallbackAPIVersion

from meteolink.shared.models import AvailabilityState, MetricValue, StatePublisher
from meteolink.shared.mqtt import (
    MQTTConfig,
    create_availability_payload,
    create_sensor_payload,
)

logger = logging.getLogger(__name__)


class MQTTPublisher(StatePublisher):
    """Publishes session metrics and availability to an MQTT broker."""

    def __init__(self, config: MQTTConfig, topic_prefix: str, sensor_id: str):
        """Initialize MQTT publisher.

        Args:
            config: MQTT configuration.
            topic_prefix: Prefix for all topics (e.g., "weather/davis").
            sensor_id: Sensor identifier carried in every payload.
        """
        self.config = config
        self.topic_prefix = topic_prefix
        self.sensor_id = sensor_id
        self.client: Optional[mqtt.Client] = None
        self._connected = False
        self._connect_event = threading.Event()

    def _on_connect(self, client, userdata, flags, reason_code, properties):
        """Handle connection to broker."""
        if reason_code == 0:
            logger.info(
                f"Connected to MQTT broker at {self.config.broker}:{self.config.port}"
            )
            self._connected = True
        else:
            logger.error(f"Failed to connect to MQTT broker: {reason_code}")
            self._connected = False
        self._connect_event.set()

    def _on_disconnect(self, client, userdata, disconnect_flags, reason_code, properties):
        """Handle disconnection from broker."""
        self._connected = False
        if reason_code != 0:
            logger.warning(f"Unexpected MQTT disconnection (reason={reason_code})")
        else:
            logger.info("Disconnected from MQTT broker")

    def connect(self, timeout: float = 10.0) -> bool:
        """Connect to the MQTT broker.

        Args:
            timeout: Timeout in seconds to wait for connection.

        Returns:
            True if connected successfully, False otherwise.
        """
        self._connect_event.clear()

        self.client = mqtt.Client(
            callback_api_version=CallbackAPIVersion.VERSION2,
            client_id=self.config.client_id,
        )
        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect

        logger.info(
            f"Connecting to MQTT broker at {self.config.broker}:{self.config.port}"
        )

        try:
            self.client.connect(
                self.config.broker, self.config.port, keepalive=self.config.keepalive
            )
            self.client.loop_start()

            if self._connect_event.wait(timeout=timeout):
                return self._connected
            else:
                logger.error("Timeout waiting for MQTT connection")
                return False
        except Exception as e:
            logger.error(f"Failed to connect to MQTT broker: {e}")
            return False

    def disconnect(self):
        """Disconnect from the MQTT broker."""
        if self.client:
            self.client.loop_stop()
            self.client.disconnect()
            self.client = None
            self._connected = False

    def _publish(self, topic: str, payload: str, retain: bool = False) -> None:
        if not self._connected or not self.client:
            logger.warning(f"Not connected to MQTT broker, dropping {topic}")
            return

        result = self.client.publish(topic, payload, qos=self.config.qos, retain=retain)
        if result.rc == mqtt.MQTT_ERR_SUCCESS:
            logger.debug(f"Published to {topic}: {payload}")
        else:
            logger.warning(f"Failed to publish to {topic}: rc={result.rc}")

    def publish_metric(self, channel: str, value: MetricValue, unit: str) -> None:
        """Publish a metric to {topic_prefix}/{channel}."""
        self._publish(
            f"{self.topic_prefix}/{channel}",
            create_sensor_payload(value, unit, self.sensor_id),
        )

    def publish_availability(
        self, state: AvailabilityState, detail: Optional[str] = None
    ) -> None:
        """Publish a retained availability message to {topic_prefix}/availability."""
        self._publish(
            f"{self.topic_prefix}/availability",
            create_availability_payload(state.value, detail),
            retain=True,
        )

    @property
    def is_connected(self) -> bool:
        """Check if connected to MQTT broker."""
        return self._connected
