"""Meteolink bridge - publishes decoded sensor reports to MQTT."""

__version__ = "0.1.0"

from .bridge_service import MeteoBridge


def main():
    """Entry point for the meteolink bridge service."""
    from .config import load_config
    from meteolink.shared.logging import setup_logging

    config = load_config()
    setup_logging(config.log_level)

    from .bridge_service import run_bridge
    run_bridge()


__all__ = ["MeteoBridge", "main"]
