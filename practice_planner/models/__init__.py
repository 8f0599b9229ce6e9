"""
Models package for the Practice Planner.

This package contains the core data models used throughout the application.
"""
from .schedule_spec import ScheduleSpec, ScheduleType, RepeatPattern, Weekday
from .practice import Activity, PracticeInstance, generate_id
from .template import PeriodTemplate, PracticeTemplate

__all__ = [
    "ScheduleSpec", "ScheduleType", "RepeatPattern", "Weekday",
    "Activity", "PracticeInstance", "generate_id",
    "PeriodTemplate", "PracticeTemplate"
]
