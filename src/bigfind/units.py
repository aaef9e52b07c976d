"""Size and duration parsing, byte formatting."""

import re

import humanize

_QUANTITY = re.compile(r"^(\d+)([a-zA-Z]?)$")

SIZE_UNITS = {
    "b": 1,
    "k": 1024,
    "m": 1024**2,
    "g": 1024**3,
    "t": 1024**4,
}

MINUTE = 60
HOUR = 60 * MINUTE
DAY = 24 * HOUR
WEEK = 7 * DAY
YEAR = 365.25 * DAY
MONTH = YEAR / 12

# Case matters: "m" is minutes, "M" is months
DURATION_UNITS = {
    "s": 1,
    "m": MINUTE,
    "h": HOUR,
    "d": DAY,
    "w": WEEK,
    "M": MONTH,
    "y": YEAR,
}


def _digest(value: str) -> tuple[int, str]:
    match = _QUANTITY.match(value.strip())
    if not match:
        raise ValueError(f"Unparsable quantity: {value!r}")
    return int(match.group(1)), match.group(2)


def parse_size(value: str) -> int:
    """
    Parse a size such as ``400``, ``20m`` or ``5G`` into bytes.

    Units are binary multiples (1k = 1024 bytes) up to terabytes; a bare
    number is bytes.

    Raises:
        ValueError: If the value cannot be parsed or the unit is unknown
    """
    amount, unit = _digest(value)
    if not unit:
        return amount
    try:
        return amount * SIZE_UNITS[unit.lower()]
    except KeyError:
        raise ValueError(f"Invalid size unit {unit!r} in {value!r}") from None


def parse_duration(value: str) -> float:
    """
    Parse a duration such as ``42``, ``3d`` or ``5M`` into seconds.

    Raises:
        ValueError: If the value cannot be parsed or the unit is unknown
    """
    amount, unit = _digest(value)
    try:
        return float(amount * DURATION_UNITS[unit or "s"])
    except KeyError:
        raise ValueError(f"Invalid duration unit {unit!r} in {value!r}") from None


def format_size(num: int) -> str:
    return humanize.naturalsize(num, binary=True)
