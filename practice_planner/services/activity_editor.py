"""
Activity list transforms for the Practice Planner application.

Every function here takes an ordered activity list and returns a new list;
inputs are never mutated. Callers run the result through the timeline
builder before committing it.
"""
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

from ..models import Activity
from ..utils import (
    DEFAULT_ACTIVITY_DURATION_MIN, MAX_ACTIVITY_DURATION_MIN, MIN_ACTIVITY_DURATION_MIN
)


@dataclass(frozen=True)
class EditingActivity:
    """The activity currently open in the edit form, and where it sits."""

    activity: Activity
    index: int
    plan_edit_mode: bool = True


def clamp_duration(value: Any) -> int:
    """
    Coerce user input into a valid activity duration.

    Unparseable or zero input falls back to the default length; anything
    else is clamped into the allowed range.

    Example:
        >>> clamp_duration("20")
        20
        >>> clamp_duration("abc")
        15
        >>> clamp_duration(500)
        180
    """
    try:
        minutes = int(value)
    except (TypeError, ValueError):
        minutes = 0
    if minutes == 0:
        minutes = DEFAULT_ACTIVITY_DURATION_MIN
    return max(MIN_ACTIVITY_DURATION_MIN, min(MAX_ACTIVITY_DURATION_MIN, minutes))


def add_activities(activities: Sequence[Activity], new: Iterable[Activity]) -> List[Activity]:
    """Append ``new`` activities after the existing ones."""
    return list(activities) + list(new)


def remove_activity(activities: Sequence[Activity], index: int) -> List[Activity]:
    """Drop the activity at ``index``; an out-of-range index changes nothing."""
    return [a for i, a in enumerate(activities) if i != index]


def move_activity(activities: Sequence[Activity], from_index: int, to_index: int) -> List[Activity]:
    """
    Move one activity to a new position, shifting the others.

    Args:
        activities: Current order
        from_index: Position of the activity being dragged
        to_index: Position it is dropped at, in the resulting list

    Returns:
        Reordered list; unchanged copy if either index is out of range
    """
    result = list(activities)
    if not (0 <= from_index < len(result) and 0 <= to_index < len(result)):
        return result
    moved = result.pop(from_index)
    result.insert(to_index, moved)
    return result


def find_activity(activities: Sequence[Activity], activity_id: str) -> Optional[int]:
    """Return the index of the activity with ``activity_id``, or None."""
    for idx, activity in enumerate(activities):
        if activity.id == activity_id:
            return idx
    return None


def update_activity(
    activities: Sequence[Activity],
    activity_id: str,
    name: Optional[str] = None,
    duration: Any = None,
    notes: Optional[str] = None,
) -> List[Activity]:
    """
    Edit one activity's name, duration or notes.

    A blank name keeps the old one, the duration is clamped and notes are
    trimmed. An unknown id leaves the list unchanged.
    """
    result = list(activities)
    idx = find_activity(result, activity_id)
    if idx is None:
        return result

    current = result[idx]
    changes = {}
    if name is not None:
        changes["name"] = name.strip() or current.name
    if duration is not None:
        changes["duration"] = clamp_duration(duration)
    if notes is not None:
        changes["notes"] = notes.strip()
    result[idx] = current.copy(**changes)
    return result


def apply_activity_edit(
    activities: Sequence[Activity],
    editing: EditingActivity,
    name: Optional[str] = None,
    duration: Any = None,
    notes: Optional[str] = None,
) -> List[Activity]:
    """
    Save the edit form for ``editing`` back into the list.

    The activity is located by id so that a reorder made while the form
    was open does not redirect the edit to a different activity. A form
    opened outside plan edit mode is read-only and changes nothing.
    """
    if not editing.plan_edit_mode:
        return list(activities)
    return update_activity(activities, editing.activity.id, name=name, duration=duration, notes=notes)
