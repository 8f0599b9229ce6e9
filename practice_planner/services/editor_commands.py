"""
Command pattern implementation for practice editing.

This module provides undoable editor actions over a practice draft. Every
command rewrites the draft's activity list (or start time) and the draft
immediately recomputes its timeline, so the draft is always consistent.
The draft is a proposal: nothing is persisted until the caller saves it.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, List, Optional, Sequence

from loguru import logger

from ..models import Activity, PeriodTemplate, PracticeInstance
from ..utils import MAX_EDITOR_HISTORY
from . import activity_editor
from .timeline_builder import TimelineBuilder


@dataclass(frozen=True)
class DraftSnapshot:
    """Immutable copy of a draft's editable state for undo."""
    start_time: datetime
    activities: tuple
    duration: int

    @classmethod
    def from_practice(cls, practice: PracticeInstance) -> "DraftSnapshot":
        return cls(
            start_time=practice.start_time,
            activities=tuple(a.copy() for a in practice.activities),
            duration=practice.duration,
        )


class PracticeDraft:
    """
    Working copy of a practice being edited.

    Holds the saved original alongside the edited version so the editor can
    tell whether there is anything to save or discard.
    """

    def __init__(self, practice: PracticeInstance, timeline: Optional[TimelineBuilder] = None):
        self.timeline = timeline or TimelineBuilder()
        self.original = practice.copy()
        self.practice = self.timeline.apply(practice)

    @property
    def activities(self) -> List[Activity]:
        return self.practice.activities

    def has_changes(self) -> bool:
        """True when the activity order, contents or start time differ from the original."""
        if self.practice.start_time != self.original.start_time:
            return True
        current = [(a.id, a.name, a.duration, a.notes) for a in self.practice.activities]
        saved = [(a.id, a.name, a.duration, a.notes) for a in self.original.activities]
        return current != saved

    def set_activities(self, activities: Sequence[Activity]) -> None:
        """Replace the activity list and recompute the timeline."""
        self.practice = self.timeline.apply(self.practice.copy(activities=list(activities)))

    def reschedule(self, start_time: datetime) -> None:
        """Move the practice start and recompute the timeline."""
        self.practice = self.timeline.apply(self.practice.copy(start_time=start_time))

    def restore(self, snapshot: DraftSnapshot) -> None:
        self.practice = self.timeline.apply(
            self.practice.copy(
                start_time=snapshot.start_time,
                activities=[a.copy() for a in snapshot.activities],
                duration=snapshot.duration,
            )
        )

    def discard(self) -> None:
        """Throw away every edit and return to the saved practice."""
        self.practice = self.timeline.apply(self.original)


class Command(ABC):
    """
    One undoable edit to a practice draft.

    The draft state is captured before and after the first execution, so
    undo and redo restore exact snapshots and never re-run the edit.
    """

    def __init__(self, draft: PracticeDraft):
        self.draft = draft
        self._before: Optional[DraftSnapshot] = None
        self._after: Optional[DraftSnapshot] = None

    def execute(self) -> bool:
        """
        Apply the edit to the draft.

        Returns:
            True if the draft changed, False if the command was a no-op
        """
        before = DraftSnapshot.from_practice(self.draft.practice)
        self._apply()
        after = DraftSnapshot.from_practice(self.draft.practice)
        if after.start_time == before.start_time and _activity_dicts(after) == _activity_dicts(before):
            return False
        self._before, self._after = before, after
        return True

    def undo(self) -> bool:
        """Restore the draft as it was before the edit."""
        if self._before is None:
            return False
        self.draft.restore(self._before)
        return True

    def redo(self) -> bool:
        """Restore the draft as it was right after the edit."""
        if self._after is None:
            return False
        self.draft.restore(self._after)
        return True

    @abstractmethod
    def _apply(self) -> None:
        """Mutate the draft."""

    @property
    @abstractmethod
    def description(self) -> str:
        """Get human-readable description of the command."""


def _activity_dicts(snapshot: DraftSnapshot) -> list:
    return [a.to_dict() for a in snapshot.activities]


class AddActivitiesCommand(Command):
    """Command to append ready-made activities to the practice."""

    def __init__(self, draft: PracticeDraft, activities: Sequence[Activity]):
        super().__init__(draft)
        self.activities = list(activities)

    def _apply(self) -> None:
        self.draft.set_activities(activity_editor.add_activities(self.draft.activities, self.activities))

    @property
    def description(self) -> str:
        return f"Add {len(self.activities)} activities"


class AddPeriodsCommand(AddActivitiesCommand):
    """Command to append library periods; each period becomes one new activity."""

    def __init__(self, draft: PracticeDraft, periods: Sequence[PeriodTemplate]):
        super().__init__(draft, [p.instantiate() for p in periods])
        self.periods = list(periods)

    @property
    def description(self) -> str:
        if len(self.periods) == 1:
            return f"Add {self.periods[0].name}"
        return f"Add {len(self.periods)} periods"


class RemoveActivityCommand(Command):
    """Command to remove one activity."""

    def __init__(self, draft: PracticeDraft, index: int):
        super().__init__(draft)
        self.index = index

    def _apply(self) -> None:
        self.draft.set_activities(activity_editor.remove_activity(self.draft.activities, self.index))

    @property
    def description(self) -> str:
        return f"Remove activity {self.index + 1}"


class MoveActivityCommand(Command):
    """Command to reorder one activity (drag and drop)."""

    def __init__(self, draft: PracticeDraft, from_index: int, to_index: int):
        super().__init__(draft)
        self.from_index = from_index
        self.to_index = to_index

    def _apply(self) -> None:
        self.draft.set_activities(
            activity_editor.move_activity(self.draft.activities, self.from_index, self.to_index)
        )

    @property
    def description(self) -> str:
        return f"Move activity {self.from_index + 1} → {self.to_index + 1}"


class UpdateActivityCommand(Command):
    """Command to save the activity edit form."""

    def __init__(self, draft: PracticeDraft, editing: activity_editor.EditingActivity, **fields: Any):
        super().__init__(draft)
        self.editing = editing
        self.fields = fields

    def _apply(self) -> None:
        self.draft.set_activities(
            activity_editor.apply_activity_edit(self.draft.activities, self.editing, **self.fields)
        )

    @property
    def description(self) -> str:
        return f"Edit {self.editing.activity.name}"


class RescheduleCommand(Command):
    """Command to change the practice start time."""

    def __init__(self, draft: PracticeDraft, start_time: datetime):
        super().__init__(draft)
        self.start_time = start_time

    def _apply(self) -> None:
        self.draft.reschedule(self.start_time)

    @property
    def description(self) -> str:
        return f"Reschedule to {self.start_time:%Y-%m-%d %H:%M}"


class EditorCommandManager:
    """
    Edit session over one practice draft with undo/redo.

    Commands must target the manager's draft. The undo stack holds at most
    ``max_history`` edits; starting a new edit drops anything that was
    undone.
    """

    def __init__(self, draft: PracticeDraft, max_history: int = MAX_EDITOR_HISTORY):
        self.draft = draft
        self.max_history = max_history
        self._done: List[Command] = []
        self._undone: List[Command] = []

    def execute_command(self, command: Command) -> bool:
        """
        Run ``command`` against the draft and record it.

        Returns:
            True if the draft changed; no-op commands are not recorded

        Raises:
            ValueError: If the command was built for a different draft
        """
        if command.draft is not self.draft:
            raise ValueError("Command targets a different practice draft")
        if not command.execute():
            return False

        self._done.append(command)
        del self._done[:-self.max_history]
        self._undone.clear()
        logger.debug("Executed editor command", command=command.description,
                     practice_id=self.draft.practice.id)
        return True

    def undo(self) -> bool:
        """Undo the most recent edit; False when there is nothing to undo."""
        if not self._done:
            return False
        command = self._done.pop()
        command.undo()
        self._undone.append(command)
        return True

    def redo(self) -> bool:
        """Re-apply the most recently undone edit; False when there is none."""
        if not self._undone:
            return False
        command = self._undone.pop()
        command.redo()
        self._done.append(command)
        return True

    def can_undo(self) -> bool:
        return bool(self._done)

    def can_redo(self) -> bool:
        return bool(self._undone)

    def has_unsaved_changes(self) -> bool:
        return self.draft.has_changes()

    def discard_changes(self) -> None:
        """Drop every edit and return the draft to the saved practice."""
        self.draft.discard()
        self.clear_history()

    def get_command_history(self) -> List[str]:
        """Descriptions of the edits that can be undone, oldest first."""
        return [cmd.description for cmd in self._done]

    def clear_history(self) -> None:
        self._done.clear()
        self._undone.clear()
