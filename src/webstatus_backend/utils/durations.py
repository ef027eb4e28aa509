"""Duration parsing utilities for configuration values."""

import re
from datetime import timedelta

# Seconds per unit.
_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}

_NUMBER = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(value: str) -> timedelta:
    """Parse a duration string such as ``"90s"``, ``"5m"`` or ``"1h30m"``.

    A bare number is read as seconds.

    Args:
        value: The duration string.

    Returns:
        The parsed duration.

    Raises:
        ValueError: If the string is not a valid duration.
    """
    text = value.strip()
    if _NUMBER.match(text):
        return timedelta(seconds=float(text))

    sign = 1.0
    if text[:1] in ("+", "-"):
        sign = -1.0 if text[0] == "-" else 1.0
        text = text[1:]

    seconds = 0.0
    position = 0
    for match in _COMPONENT.finditer(text):
        if match.start() != position:
            raise ValueError(f"invalid duration: {value!r}")
        number, unit = match.groups()
        seconds += float(number) * _UNITS[unit]
        position = match.end()

    if position == 0 or position != len(text):
        raise ValueError(f"invalid duration: {value!r}")

    return timedelta(seconds=sign * seconds)
