"""
Service Factory for dependency injection.

This module provides a factory for creating properly configured service
instances with their dependencies injected.
"""
from typing import Optional

from ..models import PracticeInstance
from .editor_commands import EditorCommandManager, PracticeDraft
from .persistence_service import JsonPracticeStore, PracticeStore
from .recurrence_expander import RecurrenceExpander
from .schedule_validator import ScheduleValidator
from .series_coordinator import SeriesCoordinator
from .session_service import PracticeSessionService
from .timeline_builder import TimelineBuilder


class ServiceFactory:
    """
    Factory for creating service instances with shared dependencies.

    The store, expander, timeline builder and validator are created once and
    reused by every service the factory builds.
    """

    def __init__(self, data_file: Optional[str] = None):
        """
        Initialize factory.

        Args:
            data_file: JSON file backing the practice store; ``None`` keeps
                practices in memory only
        """
        self.data_file = data_file
        self._store: Optional[PracticeStore] = None
        self._expander: Optional[RecurrenceExpander] = None
        self._timeline: Optional[TimelineBuilder] = None
        self._validator: Optional[ScheduleValidator] = None

    def create_series_coordinator(self) -> SeriesCoordinator:
        """Create a SeriesCoordinator wired to the shared store."""
        return SeriesCoordinator(
            store=self.get_store(),
            expander=self.get_expander(),
            timeline=self.get_timeline(),
        )

    def create_draft(self, practice: PracticeInstance) -> PracticeDraft:
        """Open an editing draft for ``practice``."""
        return PracticeDraft(practice, timeline=self.get_timeline())

    def create_command_manager(self, draft: PracticeDraft) -> EditorCommandManager:
        """Start an undoable edit session over ``draft``."""
        return EditorCommandManager(draft)

    def create_session_service(self, practice: PracticeInstance) -> PracticeSessionService:
        """Create a live session tracker for ``practice``."""
        return PracticeSessionService(practice, timeline=self.get_timeline())

    def create_complete_service_suite(self) -> dict:
        """
        Create the services the web application needs.

        Returns:
            Dictionary containing all configured services
        """
        return {
            'store': self.get_store(),
            'expander': self.get_expander(),
            'timeline': self.get_timeline(),
            'validator': self.get_validator(),
            'coordinator': self.create_series_coordinator(),
        }

    def get_store(self) -> PracticeStore:
        """Get singleton practice store."""
        if self._store is None:
            if self.data_file:
                self._store = JsonPracticeStore(self.data_file)
            else:
                self._store = PracticeStore()
        return self._store

    def get_expander(self) -> RecurrenceExpander:
        """Get singleton recurrence expander."""
        if self._expander is None:
            self._expander = RecurrenceExpander()
        return self._expander

    def get_timeline(self) -> TimelineBuilder:
        """Get singleton timeline builder."""
        if self._timeline is None:
            self._timeline = TimelineBuilder()
        return self._timeline

    def get_validator(self) -> ScheduleValidator:
        """Get singleton schedule validator."""
        if self._validator is None:
            self._validator = ScheduleValidator()
        return self._validator

    def configure_custom_store(self, store: PracticeStore) -> None:
        """Use a caller-supplied store instead of the default one."""
        self._store = store
