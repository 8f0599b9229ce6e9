"""
Practice Planner

Schedules one-off or recurring team practices and keeps each practice's
activities ("periods") laid out as an ordered, gap-free timeline.

This package provides the scheduling engine and a Flask web API for
coaches to build and edit their practice plans.
"""
from .models import Activity, PracticeInstance, ScheduleSpec
from .services import (
    RecurrenceExpander, TimelineBuilder, SeriesCoordinator, PracticeStore,
    JsonPracticeStore
)
from .ui import create_app, run_web_app
from .utils import fmt_duration, APP_TITLE

__version__ = "1.0.0"

__all__ = [
    "Activity", "PracticeInstance", "ScheduleSpec", "RecurrenceExpander",
    "TimelineBuilder", "SeriesCoordinator", "PracticeStore", "JsonPracticeStore",
    "create_app", "run_web_app", "fmt_duration", "APP_TITLE"
]
