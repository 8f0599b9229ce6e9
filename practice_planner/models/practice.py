"""
Practice models for the Practice Planner application.

This module contains the Activity dataclass (one timed block, or "period",
of a practice) and the PracticeInstance dataclass (one scheduled practice
session with its ordered activities).
"""
import uuid
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..utils import DEFAULT_PRACTICE_COLOR, parse_datetime


def generate_id(prefix: str = "") -> str:
    """Return a new unique identifier, optionally prefixed (``series_...``)."""
    token = uuid.uuid4().hex
    return f"{prefix}_{token}" if prefix else token


def _parse_ts(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    return parse_datetime(value)


@dataclass
class Activity:
    """
    One named, timed block within a practice (a drill, warm-up, scrimmage...).

    Attributes:
        id: Stable identifier; survives reordering
        name: Display name
        duration: Length in whole minutes
        notes: Free-form coaching notes
        tags: Tag labels copied from the period library
        start_time: Derived by the timeline builder, never set by hand
        end_time: Derived by the timeline builder, never set by hand
    """
    name: str
    duration: int
    id: str = field(default_factory=generate_id)
    notes: str = ""
    tags: List[str] = field(default_factory=list)
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    def copy(self, **changes: Any) -> "Activity":
        """Return a copy with its own tag list, applying ``changes``."""
        changes.setdefault("tags", list(self.tags))
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "duration": self.duration,
            "notes": self.notes,
            "tags": list(self.tags),
            "start_time": self.start_time.isoformat() if self.start_time else None,
            "end_time": self.end_time.isoformat() if self.end_time else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Activity":
        """
        Create from dictionary for JSON deserialization.

        A missing id is replaced by a fresh one so that every activity
        keeps a stable identity once loaded.
        """
        return cls(
            id=data.get("id") or generate_id(),
            name=data["name"],
            duration=int(data["duration"]),
            notes=data.get("notes") or "",
            tags=list(data.get("tags") or []),
            start_time=_parse_ts(data.get("start_time")),
            end_time=_parse_ts(data.get("end_time")),
        )


@dataclass
class PracticeInstance:
    """
    One scheduled practice session.

    Attributes:
        start_time: Absolute start (naive local wall-clock time)
        end_time: Absolute end, derived from the activities
        duration: Total length in minutes, derived from the activities
        activities: Ordered activities; order defines the timeline
        id: Unique practice identifier
        series_id: Shared by every practice created from one recurring schedule
        tags: Practice-level tag labels
        color: Calendar colour label
    """
    start_time: datetime
    end_time: datetime
    duration: int
    activities: List[Activity] = field(default_factory=list)
    id: str = field(default_factory=generate_id)
    series_id: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    color: str = DEFAULT_PRACTICE_COLOR

    @property
    def in_series(self) -> bool:
        return self.series_id is not None

    def activity_index(self, activity_id: str) -> int:
        """
        Find the position of an activity by id.

        Raises:
            KeyError: If no activity has that id
        """
        for idx, activity in enumerate(self.activities):
            if activity.id == activity_id:
                return idx
        raise KeyError(activity_id)

    def copy(self, **changes: Any) -> "PracticeInstance":
        """Return a copy that shares no mutable state with this instance."""
        changes.setdefault("activities", [a.copy() for a in self.activities])
        changes.setdefault("tags", list(self.tags))
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "series_id": self.series_id,
            "start_time": self.start_time.isoformat(),
            "end_time": self.end_time.isoformat(),
            "duration": self.duration,
            "activities": [a.to_dict() for a in self.activities],
            "tags": list(self.tags),
            "color": self.color,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PracticeInstance":
        """
        Create from dictionary for JSON deserialization.

        Raises:
            KeyError: If a required field is missing
            ValueError: If a timestamp is malformed
        """
        return cls(
            id=data["id"],
            series_id=data.get("series_id"),
            start_time=parse_datetime(data["start_time"]),
            end_time=parse_datetime(data["end_time"]),
            duration=int(data["duration"]),
            activities=[Activity.from_dict(a) for a in data.get("activities", [])],
            tags=list(data.get("tags") or []),
            color=data.get("color") or DEFAULT_PRACTICE_COLOR,
        )
