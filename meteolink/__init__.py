"""Meteolink: rain gauge and weather transmitter ingestion."""

__version__ = "0.1.0"
