"""Time-of-day parsing and arithmetic."""

import re
from datetime import date, datetime, time, timedelta

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})(?::(\d{2}))?$")


def parse_time(time_str: str) -> time:
    """Parse "H:MM", "HH:MM" or "HH:MM:SS" into a time.

    Raises:
        ValueError: If the string is not a valid time of day
    """
    match = _TIME_RE.match(time_str.strip())
    if match is None:
        raise ValueError(f"Could not parse time '{time_str}': expected HH:MM or HH:MM:SS")
    hour, minute, second = (int(part) if part else 0 for part in match.groups())
    try:
        return time(hour, minute, second)
    except ValueError as e:
        raise ValueError(f"Could not parse time '{time_str}': {e}")


def format_time(value: time) -> str:
    """Format a time as zero-padded HH:MM."""
    return value.strftime("%H:%M")


def add_minutes(value: time, minutes: int) -> time:
    """Add minutes to a time of day.

    Raises:
        ValueError: If the result would roll past midnight
    """
    shifted = datetime.combine(date.min, value) + timedelta(minutes=minutes)
    if shifted.date() != date.min:
        raise ValueError(f"{format_time(value)} + {minutes} minutes runs past midnight")
    return shifted.time()

