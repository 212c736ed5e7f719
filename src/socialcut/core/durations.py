"""Parsing of human duration strings such as "1m30s" or "1.5h"."""

import re

_UNIT_SECONDS: dict[str, float] = {
    "h": 3600.0,
    "m": 60.0,
    "s": 1.0,
    "ms": 1e-3,
    "us": 1e-6,
    "µs": 1e-6,
    "ns": 1e-9,
}

# Longer unit names first so "ms" is not read as "m" followed by "s"
_COMPONENT = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|h|m|s)")
_PLAIN_NUMBER = re.compile(r"\d+(?:\.\d*)?|\.\d+")


def parse_duration_string(value: str) -> float:
    """Parse a duration string into seconds.

    Accepts a sequence of decimal numbers with unit suffixes (h, m, s, ms,
    us, ns), e.g. "10s", "1m30s", "1.5h", "2h45m". A bare number is read
    as seconds, and "0" is valid.

    Args:
        value: Duration string.

    Returns:
        Duration in seconds.

    Raises:
        ValueError: If the string is empty, negative or malformed.
    """
    text = value.strip()
    if not text:
        raise ValueError("Duration must not be empty")
    if text.startswith("-"):
        raise ValueError(f"Duration must not be negative: {value}")
    text = text.lstrip("+")

    if _PLAIN_NUMBER.fullmatch(text):
        return float(text)

    total = 0.0
    position = 0
    while position < len(text):
        match = _COMPONENT.match(text, position)
        if match is None:
            raise ValueError(f"Invalid duration: {value}")
        number, unit = match.groups()
        total += float(number) * _UNIT_SECONDS[unit]
        position = match.end()
    return total
