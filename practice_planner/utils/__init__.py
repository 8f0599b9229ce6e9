"""
Utilities package for the Practice Planner.

This package contains utility functions used throughout the application.
"""
from .time_utils import (
    fmt_mmss, fmt_duration, fmt_time_range, now, to_date, combine,
    minutes_between, parse_time_of_day, to_local_naive, parse_datetime
)
from .constants import (
    APP_TITLE, MIN_ACTIVITY_DURATION_MIN, MAX_ACTIVITY_DURATION_MIN,
    DEFAULT_ACTIVITY_DURATION_MIN, PLACEHOLDER_PRACTICE_DURATION_MIN,
    DEFAULT_START_TIME, DEFAULT_PRACTICE_DAYS, DEFAULT_SERIES_LENGTH_DAYS,
    DEFAULT_PRACTICE_COLOR, MAX_EDITOR_HISTORY, DEFAULT_HOST, DEFAULT_PORT,
    DEFAULT_DATA_FILE
)

__all__ = [
    "fmt_mmss", "fmt_duration", "fmt_time_range", "now", "to_date", "combine",
    "minutes_between", "parse_time_of_day", "to_local_naive", "parse_datetime",
    "APP_TITLE", "MIN_ACTIVITY_DURATION_MIN", "MAX_ACTIVITY_DURATION_MIN",
    "DEFAULT_ACTIVITY_DURATION_MIN", "PLACEHOLDER_PRACTICE_DURATION_MIN",
    "DEFAULT_START_TIME", "DEFAULT_PRACTICE_DAYS", "DEFAULT_SERIES_LENGTH_DAYS",
    "DEFAULT_PRACTICE_COLOR", "MAX_EDITOR_HISTORY", "DEFAULT_HOST",
    "DEFAULT_PORT", "DEFAULT_DATA_FILE"
]
