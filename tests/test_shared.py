"""Tests for shared config and payload helpers."""

import json
import logging

import pytest

from meteolink.shared.config import get_config_path, get_log_level, load_yaml_config
from meteolink.shared.logging import setup_logging
from meteolink.shared.mqtt import MQTTConfig, create_availability_payload, create_sensor_payload


def test_config_path_in_given_dir(tmp_path):
    assert get_config_path("bridge.yaml", config_dir=tmp_path) == tmp_path / "bridge.yaml"


def test_config_path_defaults_to_repo_config_dir():
    path = get_config_path("bridge.yaml")
    assert path.name == "bridge.yaml"
    assert path.parent.name == "config"


def test_load_yaml_config_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_yaml_config(tmp_path / "nope.yaml", load_env=False)


def test_load_yaml_config_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert load_yaml_config(path, load_env=False) == {}


def test_log_level_default():
    assert get_log_level({}) == "INFO"
    assert get_log_level({"log_level": "debug"}) == "DEBUG"


def test_setup_logging_quiets_paho():
    setup_logging("DEBUG")
    assert logging.getLogger("paho").level == logging.WARNING


def test_mqtt_config_from_dict():
    config = MQTTConfig.from_dict({"broker": "mqtt.local"})
    assert config.broker == "mqtt.local"
    assert config.port == 1883


def test_sensor_payload():
    payload = json.loads(create_sensor_payload(1.5, "mm", "davis", timestamp=100.0))
    assert payload == {"value": 1.5, "unit": "mm", "ts": 100.0, "sensor": "davis"}


def test_availability_payload():
    payload = json.loads(create_availability_payload("online", timestamp=100.0))
    assert payload == {"state": "online", "detail": None, "ts": 100.0}
