"""
Services package for the Practice Planner.

This package contains service classes that handle scheduling and editing logic.
Includes factory for dependency injection.
"""
from .recurrence_expander import RecurrenceExpander
from .timeline_builder import TimelineBuilder, TimelineResult
from .schedule_validator import ScheduleValidator, ScheduleValidationError
from .persistence_service import PracticeStore, JsonPracticeStore, PracticeNotFoundError
from .series_coordinator import (
    SeriesCoordinator, ScopeDecision, EditScope, PracticeChanges,
    SeriesOperationError
)
from .activity_editor import EditingActivity, clamp_duration, move_activity
from .editor_commands import (
    PracticeDraft, EditorCommandManager, AddActivitiesCommand, AddPeriodsCommand,
    RemoveActivityCommand, MoveActivityCommand, UpdateActivityCommand, RescheduleCommand
)
from .session_service import PracticeSessionService, PracticeSessionState
from .service_factory import ServiceFactory

__all__ = [
    "RecurrenceExpander", "TimelineBuilder", "TimelineResult",
    "ScheduleValidator", "ScheduleValidationError",
    "PracticeStore", "JsonPracticeStore", "PracticeNotFoundError",
    "SeriesCoordinator", "ScopeDecision", "EditScope", "PracticeChanges",
    "SeriesOperationError", "EditingActivity", "clamp_duration", "move_activity",
    "PracticeDraft", "EditorCommandManager", "AddActivitiesCommand",
    "AddPeriodsCommand", "RemoveActivityCommand", "MoveActivityCommand",
    "UpdateActivityCommand", "RescheduleCommand",
    "PracticeSessionService", "PracticeSessionState", "ServiceFactory"
]
