"""
ScheduleSpec model for the Practice Planner application.

This module contains the ScheduleSpec dataclass which represents the
"Schedule Practice" form: a single practice or a daily/weekly recurring
series, before it is expanded into concrete practice dates.
"""
from dataclasses import dataclass, field
from datetime import date, time, timedelta
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Set

from ..utils import (
    DEFAULT_PRACTICE_DAYS, DEFAULT_SERIES_LENGTH_DAYS, DEFAULT_START_TIME,
    parse_time_of_day
)


class ScheduleType(Enum):
    """Whether the form schedules one practice or a recurring set."""
    SINGLE = "single"
    MULTIPLE = "multiple"


class RepeatPattern(Enum):
    """Repetition rule for multiple-practice schedules."""
    DAILY = "daily"
    WEEKLY = "weekly"


class Weekday(Enum):
    """Days of the week, valued by ``date.weekday()`` (Monday is 0)."""
    MONDAY = 0
    TUESDAY = 1
    WEDNESDAY = 2
    THURSDAY = 3
    FRIDAY = 4
    SATURDAY = 5
    SUNDAY = 6

    @property
    def label(self) -> str:
        """Display name, e.g. ``Monday``."""
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: Any) -> "Weekday":
        """
        Parse a weekday from a name, three-letter abbreviation or index.

        Args:
            value: ``"Monday"``, ``"monday"``, ``"Mon"``, ``0`` or a Weekday

        Returns:
            Matching Weekday

        Raises:
            ValueError: If the value names no weekday
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, int):
            return cls(value)
        text = str(value).strip().upper()
        for day in cls:
            if day.name == text or day.name[:3] == text:
                return day
        raise ValueError(f"Unknown weekday: {value!r}")

    @classmethod
    def parse_many(cls, values: Iterable[Any]) -> Set["Weekday"]:
        """Parse a collection of weekday names into a set."""
        return {cls.parse(v) for v in values}


@dataclass
class ScheduleSpec:
    """
    Transient schedule specification submitted by the creation form.

    Attributes:
        schedule_type: Single practice or a recurring set
        start_date: First (or only) practice date
        start_time: Time of day every practice starts at
        repeat_pattern: Daily or weekly repetition (multiple only)
        end_date: Last date of the range, inclusive (multiple only)
        practice_days: Weekdays to keep (weekly only)
    """
    schedule_type: ScheduleType = ScheduleType.SINGLE
    start_date: date = field(default_factory=date.today)
    start_time: time = DEFAULT_START_TIME
    repeat_pattern: Optional[RepeatPattern] = None
    end_date: Optional[date] = None
    practice_days: Set[Weekday] = field(default_factory=set)

    @property
    def is_recurring(self) -> bool:
        return self.schedule_type is ScheduleType.MULTIPLE

    @classmethod
    def single(cls, start_date: date, start_time: time = DEFAULT_START_TIME) -> "ScheduleSpec":
        """Build a one-off practice specification."""
        return cls(schedule_type=ScheduleType.SINGLE, start_date=start_date, start_time=start_time)

    @classmethod
    def daily(cls, start_date: date, end_date: date,
              start_time: time = DEFAULT_START_TIME) -> "ScheduleSpec":
        """Build a practice-every-day specification."""
        return cls(
            schedule_type=ScheduleType.MULTIPLE,
            repeat_pattern=RepeatPattern.DAILY,
            start_date=start_date,
            end_date=end_date,
            start_time=start_time,
        )

    @classmethod
    def weekly(cls, start_date: date, end_date: date, practice_days: Iterable[Any],
               start_time: time = DEFAULT_START_TIME) -> "ScheduleSpec":
        """Build a practice-on-selected-weekdays specification."""
        return cls(
            schedule_type=ScheduleType.MULTIPLE,
            repeat_pattern=RepeatPattern.WEEKLY,
            start_date=start_date,
            end_date=end_date,
            start_time=start_time,
            practice_days=Weekday.parse_many(practice_days),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        data: Dict[str, Any] = {
            "schedule_type": self.schedule_type.value,
            "start_date": self.start_date.isoformat(),
            "start_time": self.start_time.strftime("%H:%M"),
        }
        if self.is_recurring:
            data["repeat_pattern"] = self.repeat_pattern.value if self.repeat_pattern else None
            data["end_date"] = self.end_date.isoformat() if self.end_date else None
            if self.repeat_pattern is RepeatPattern.WEEKLY:
                data["practice_days"] = [
                    d.label for d in sorted(self.practice_days, key=lambda d: d.value)
                ]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ScheduleSpec":
        """
        Create from a form payload.

        Missing optional fields fall back to the form defaults: weekly
        repetition, 15:00 start, Monday/Wednesday/Friday and an end date
        90 days after the start.

        Raises:
            ValueError: If a date, time, enum or weekday value is malformed
            KeyError: If ``start_date`` is missing
        """
        schedule_type = ScheduleType(data.get("schedule_type", ScheduleType.SINGLE.value))
        start_date = date.fromisoformat(data["start_date"])
        start_time = (
            parse_time_of_day(data["start_time"])
            if data.get("start_time") else DEFAULT_START_TIME
        )

        if schedule_type is ScheduleType.SINGLE:
            return cls.single(start_date, start_time)

        repeat_pattern = RepeatPattern(data.get("repeat_pattern") or RepeatPattern.WEEKLY.value)
        end_date = (
            date.fromisoformat(data["end_date"])
            if data.get("end_date")
            else start_date + timedelta(days=DEFAULT_SERIES_LENGTH_DAYS)
        )
        practice_days: Set[Weekday] = set()
        if repeat_pattern is RepeatPattern.WEEKLY:
            raw_days = data.get("practice_days")
            practice_days = Weekday.parse_many(
                DEFAULT_PRACTICE_DAYS if raw_days is None else raw_days
            )

        return cls(
            schedule_type=schedule_type,
            start_date=start_date,
            start_time=start_time,
            repeat_pattern=repeat_pattern,
            end_date=end_date,
            practice_days=practice_days,
        )
