"""Decoder for single-line transmitter reports.

A report arrives as an ordered list of fields, e.g. ``R 1 57 -65 L``:
tag, channel, one or two values, RSSI in dBm and an optional trailing
field that is only present when the transmitter battery is low.
"""

import math
import re
from typing import Callable, Dict, List, Sequence

from meteolink.shared.models import (
    RainReading,
    SensorReading,
    SolarReading,
    TemperatureReading,
    WindReading,
)

_FIELD_SEPARATOR = re.compile(r"[\s,]+")

# Plain ASCII decimal numbers: no digit separators, inf or nan
_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?([0-9]+\.?[0-9]*|\.[0-9]+)([eE][+-]?[0-9]+)?")


class DecodeError(Exception):
    """Raised when a report cannot be turned into a reading."""

    pass


class UnknownTagError(DecodeError):
    """Raised when the first field is not a known report tag."""

    pass


class MalformedFieldError(DecodeError):
    """Raised when a required field is missing or not numeric."""

    pass


def split_fields(line: str) -> List[str]:
    """Split a raw line on whitespace and/or commas, dropping empty tokens."""
    return [field for field in _FIELD_SEPARATOR.split(line.strip()) if field]


def signal_strength(dbm: float) -> int:
    """Classify an RSSI value into 0-4 bars."""
    if dbm > -60:
        return 4
    elif dbm > -70:
        return 3
    elif dbm > -80:
        return 2
    elif dbm > -90:
        return 1
    return 0


def _field(fields: Sequence[str], index: int, pattern: "re.Pattern") -> str:
    try:
        value = fields[index]
    except IndexError:
        raise MalformedFieldError(f"Missing field {index} in {list(fields)}")
    if not pattern.fullmatch(value):
        raise MalformedFieldError(f"Field {index} is not numeric: {value!r}")
    return value


def _integer(fields: Sequence[str], index: int) -> int:
    return int(_field(fields, index, _INTEGER))


def _decimal(fields: Sequence[str], index: int) -> float:
    value = float(_field(fields, index, _DECIMAL))
    if not math.isfinite(value):
        raise MalformedFieldError(f"Field {index} is out of range: {fields[index]!r}")
    return value


def _common(fields: Sequence[str], signal_index: int) -> dict:
    # Low battery is signalled by exactly one extra trailing field
    dbm = _decimal(fields, signal_index)
    return {
        "signal_dbm": dbm,
        "signal_strength": signal_strength(dbm),
        "battery_low": len(fields) == signal_index + 2,
    }


def _decode_rain(fields: Sequence[str]) -> RainReading:
    return RainReading(
        counter=_integer(fields, 2),
        **_common(fields, 3),
    )


def _decode_wind(fields: Sequence[str]) -> WindReading:
    return WindReading(
        speed_ms=_decimal(fields, 2),
        direction_deg=_integer(fields, 3),
        **_common(fields, 4),
    )


def _decode_temperature(fields: Sequence[str]) -> TemperatureReading:
    return TemperatureReading(
        celsius=_decimal(fields, 2),
        humidity_pct=_decimal(fields, 3),
        **_common(fields, 4),
    )


def _decode_solar(fields: Sequence[str]) -> SolarReading:
    return SolarReading(
        power=_decimal(fields, 2),
        **_common(fields, 3),
    )


DECODERS: Dict[str, Callable[[Sequence[str]], SensorReading]] = {
    "R": _decode_rain,
    "W": _decode_wind,
    "T": _decode_temperature,
    "P": _decode_solar,
}


def decode(fields: Sequence[str]) -> SensorReading:
    """Decode one framed report into a typed reading.

    Args:
        fields: The report split into fields, tag first.

    Returns:
        A RainReading, WindReading, TemperatureReading or SolarReading.

    Raises:
        UnknownTagError: If the tag is not one of R, W, T, P.
        MalformedFieldError: If a required field is missing or not numeric.
    """
    if not fields:
        raise MalformedFieldError("Empty report")

    decoder = DECODERS.get(fields[0])
    if decoder is None:
        raise UnknownTagError(f"Unknown report tag: {fields[0]!r}")

    return decoder(fields)
