"""
Timeline builder for the Practice Planner application.

This module lays activities end to end from a practice's start time and
derives the practice's end time and total duration.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional, Sequence

from loguru import logger

from ..models import Activity, PracticeInstance
from ..utils import minutes_between


@dataclass
class TimelineResult:
    """Outcome of a recompute: timed activities plus the practice window."""

    end_time: datetime
    duration: int
    activities: List[Activity] = field(default_factory=list)


class TimelineBuilder:
    """
    Computes activity start/end times as a sequential fold.

    The builder is a pure function of its inputs: it returns timed copies of
    the activities and never mutates what it is given, so it can be called
    after every add/remove/reorder/resize without accumulating drift.
    """

    def recompute(
        self,
        start_time: datetime,
        activities: Sequence[Activity],
        stored_duration: Optional[int] = None,
    ) -> TimelineResult:
        """
        Lay ``activities`` out back to back starting at ``start_time``.

        Args:
            start_time: Practice start
            activities: Activities in practice order
            stored_duration: The practice's current duration, kept when there
                are no activities to derive one from

        Returns:
            TimelineResult with timed activity copies, end time and duration
        """
        if not activities:
            duration = max(0, int(stored_duration or 0))
            return TimelineResult(
                end_time=start_time + timedelta(minutes=duration),
                duration=duration,
                activities=[],
            )

        cursor = start_time
        timed: List[Activity] = []
        for activity in activities:
            # a negative length would run the cursor backwards
            length = timedelta(minutes=max(0, activity.duration))
            timed.append(activity.copy(start_time=cursor, end_time=cursor + length))
            cursor = cursor + length

        return TimelineResult(
            end_time=cursor,
            duration=minutes_between(start_time, cursor),
            activities=timed,
        )

    def apply(self, practice: PracticeInstance) -> PracticeInstance:
        """Return a copy of ``practice`` with its timeline recomputed."""

        result = self.recompute(practice.start_time, practice.activities, practice.duration)
        logger.debug(
            "Recomputed practice timeline",
            practice_id=practice.id,
            activity_count=len(result.activities),
            duration=result.duration,
        )
        return practice.copy(
            activities=result.activities,
            end_time=result.end_time,
            duration=result.duration,
        )
