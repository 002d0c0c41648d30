"""
Clock string codec.

Opening hours travel as "H", "HH", "H:MM" or "HH:MM" strings and are stored
as an integer minute of the day.
"""

import re

from ..errors import FormatError

MINUTES_PER_DAY = 24 * 60

_CLOCK_PATTERN = re.compile(r"(\d{1,2})(?::(\d{1,2}))?")


def parse_clock(value: str) -> int:
    """
    Convert a clock string into a minute of the day.

    Args:
        value: Clock string such as "9", "09", "9:05" or "17:30"

    Returns:
        int: Minutes since midnight (0-1439)

    Raises:
        FormatError: If the string is empty, malformed or out of range
    """
    if not isinstance(value, str) or not value:
        raise FormatError("Clock value is required")

    match = _CLOCK_PATTERN.fullmatch(value)
    if not match:
        raise FormatError(f"Invalid clock format: {value!r}")

    hour = int(match.group(1))
    minute = int(match.group(2)) if match.group(2) is not None else 0

    if hour > 23:
        raise FormatError(f"Hour out of range in {value!r}")
    if minute > 59:
        raise FormatError(f"Minute out of range in {value!r}")

    return hour * 60 + minute


def format_clock(minute_of_day: int) -> str:
    """Render a minute of the day as "H:MM"."""
    if not 0 <= minute_of_day < MINUTES_PER_DAY:
        raise FormatError(f"Minute of day out of range: {minute_of_day}")
    hour, minute = divmod(minute_of_day, 60)
    return f"{hour}:{minute:02d}"
