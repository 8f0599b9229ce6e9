"""Live practice session tracking for the Practice Planner application."""

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional

from ..models import Activity, PracticeInstance
from ..utils import fmt_mmss, now
from .timeline_builder import TimelineBuilder


@dataclass
class PracticeSessionState:
    """Where a running practice is right now."""

    is_active: bool = False
    current_activity_index: Optional[int] = None
    time_remaining: int = 0  # seconds left in the current activity
    elapsed_time: int = 0  # seconds into the current activity
    total_elapsed: int = 0  # seconds since the practice started
    progress: float = 0.0  # 0-1 through the current activity

    def to_dict(self) -> Dict[str, object]:
        return {
            "is_active": self.is_active,
            "current_activity_index": self.current_activity_index,
            "time_remaining": self.time_remaining,
            "time_remaining_display": fmt_mmss(self.time_remaining),
            "elapsed_time": self.elapsed_time,
            "total_elapsed": self.total_elapsed,
            "progress": self.progress,
        }


class PracticeSessionService:
    """Service for following a practice's timeline against the wall clock."""

    def __init__(self, practice: PracticeInstance, timeline: Optional[TimelineBuilder] = None):
        self.practice = (timeline or TimelineBuilder()).apply(practice)

    # ------------------------------------------------------------------
    # Query helpers
    # ------------------------------------------------------------------
    def is_active(self, at: Optional[datetime] = None) -> bool:
        """Return True while ``at`` falls inside the practice window."""

        current = at or now()
        return self.practice.start_time <= current <= self.practice.end_time

    def get_session_state(self, at: Optional[datetime] = None) -> PracticeSessionState:
        """Return the current activity and its countdown."""

        current = at or now()
        if not self.is_active(current):
            return PracticeSessionState()

        state = PracticeSessionState(
            is_active=True,
            total_elapsed=int((current - self.practice.start_time).total_seconds()),
        )

        for idx, activity in enumerate(self.practice.activities):
            if activity.start_time <= current < activity.end_time:
                state.current_activity_index = idx
                state.elapsed_time = int((current - activity.start_time).total_seconds())
                state.time_remaining = int((activity.end_time - current).total_seconds())
                state.progress = state.elapsed_time / (activity.duration * 60)
                break

        return state

    def get_current_activity(self, at: Optional[datetime] = None) -> Optional[Activity]:
        """Return the activity running now, if any."""

        index = self.get_session_state(at).current_activity_index
        if index is None:
            return None
        return self.practice.activities[index]

    def get_next_activity(self, at: Optional[datetime] = None) -> Optional[Activity]:
        """Return the activity that starts next, if any."""

        current = at or now()
        for activity in self.practice.activities:
            if activity.start_time > current:
                return activity
        return None

    def get_remaining_seconds(self, at: Optional[datetime] = None) -> int:
        """Seconds until the practice ends (full length before it starts)."""

        current = at or now()
        if current < self.practice.start_time:
            return self.practice.duration * 60
        return max(0, int((self.practice.end_time - current).total_seconds()))

    def is_over(self, at: Optional[datetime] = None) -> bool:
        """Return True once the practice end time has passed."""

        return (at or now()) > self.practice.end_time
