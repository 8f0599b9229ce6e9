"""
Utility functions for the Practice Planner application.

This module contains date and time helpers used throughout the application.
"""
from datetime import date, datetime, time, timedelta
from typing import Union


def fmt_mmss(seconds: int) -> str:
    """
    Format seconds as a countdown string.

    Args:
        seconds: Number of seconds to format

    Returns:
        Formatted time string in M:SS format

    Example:
        >>> fmt_mmss(90)
        '1:30'
        >>> fmt_mmss(3661)
        '61:01'
    """
    m = seconds // 60
    s = seconds % 60
    return f"{m}:{s:02d}"


def fmt_duration(minutes: int) -> str:
    """
    Format a duration in minutes for display.

    Example:
        >>> fmt_duration(45)
        '45m'
        >>> fmt_duration(120)
        '2h'
        >>> fmt_duration(95)
        '1h 35m'
    """
    hours, mins = divmod(int(minutes), 60)
    if hours == 0:
        return f"{mins}m"
    if mins == 0:
        return f"{hours}h"
    return f"{hours}h {mins}m"


def fmt_time_range(start: datetime, end: datetime, duration: int) -> str:
    """Format a practice window, e.g. ``3:00 PM - 4:30 PM (1h 30m)``."""
    return f"{_fmt_clock(start)} - {_fmt_clock(end)} ({fmt_duration(duration)})"


def _fmt_clock(value: datetime) -> str:
    hour = value.hour % 12 or 12
    suffix = "AM" if value.hour < 12 else "PM"
    return f"{hour}:{value.minute:02d} {suffix}"


def now() -> datetime:
    """
    Get the current local wall-clock time.

    Returns:
        Naive datetime for the current moment
    """
    return datetime.now()


def to_date(value: Union[date, datetime]) -> date:
    """Drop the time-of-day part of a datetime; dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def combine(day: date, time_of_day: time) -> datetime:
    """Place a time of day on a calendar date (seconds are dropped)."""
    return datetime.combine(to_date(day), time(time_of_day.hour, time_of_day.minute))


def to_local_naive(value: datetime) -> datetime:
    """
    Convert a datetime to naive local wall-clock time.

    Offset-aware values are shifted into the local zone and stripped of
    their tzinfo; naive values are returned unchanged.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


def parse_datetime(value: str) -> datetime:
    """
    Parse an ISO 8601 timestamp into naive local wall-clock time.

    Raises:
        ValueError: If the string is not a valid timestamp
    """
    return to_local_naive(datetime.fromisoformat(value.strip()))


def minutes_between(start: datetime, end: datetime) -> int:
    """Whole minutes from ``start`` to ``end``, rounded to the nearest minute."""
    return round((end - start) / timedelta(minutes=1))


def parse_time_of_day(value: str) -> time:
    """
    Parse an ``HH:MM`` (or ``HH:MM:SS``) string into a time.

    Raises:
        ValueError: If the string is not a valid time of day
    """
    return time.fromisoformat(value.strip())
