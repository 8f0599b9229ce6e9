"""Recurrence expansion for the Practice Planner application."""

from datetime import date, datetime, time
from typing import Dict, List, Optional

from dateutil.rrule import DAILY, rrule
from loguru import logger

from ..models import RepeatPattern, ScheduleSpec
from ..utils import to_date


class RecurrenceExpander:
    """Turns a schedule specification into the ordered list of practice dates.

    Both operations are pure: the same spec always yields the same dates.
    Malformed-but-typed specs (inverted range, no weekdays) degrade to an
    empty result instead of raising; the schedule validator is expected to
    catch those before submission.
    """

    def expand(self, spec: ScheduleSpec) -> List[date]:
        """Return every practice date for ``spec``, ascending, without duplicates."""

        start = to_date(spec.start_date)
        if not spec.is_recurring:
            return [start]

        end = self._range_end(spec)
        if end is None:
            return []

        byweekday: Optional[List[int]] = None
        if spec.repeat_pattern is RepeatPattern.WEEKLY:
            if not spec.practice_days:
                logger.warning("Weekly schedule has no practice days", start_date=start.isoformat())
                return []
            byweekday = sorted(day.value for day in spec.practice_days)

        # start of the first day through the last instant of the final day
        rule = rrule(
            DAILY,
            dtstart=datetime.combine(start, time.min),
            until=datetime.combine(end, time.max),
            byweekday=byweekday,
        )
        return [occurrence.date() for occurrence in rule]

    def count(self, spec: ScheduleSpec) -> int:
        """Return how many practices ``spec`` would create."""

        if not spec.is_recurring:
            return 1

        if spec.repeat_pattern is RepeatPattern.DAILY:
            end = self._range_end(spec)
            if end is None:
                return 0
            return (end - to_date(spec.start_date)).days + 1

        return len(self.expand(spec))

    def preview(self, spec: ScheduleSpec) -> Dict[str, object]:
        """Return count and ISO dates for display before committing."""

        dates = self.expand(spec)
        return {
            "count": len(dates),
            "dates": [d.isoformat() for d in dates],
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _range_end(self, spec: ScheduleSpec) -> Optional[date]:
        if spec.end_date is None:
            logger.warning("Recurring schedule has no end date")
            return None

        start = to_date(spec.start_date)
        end = to_date(spec.end_date)
        if end < start:
            logger.warning(
                "Schedule end date precedes start date",
                start_date=start.isoformat(),
                end_date=end.isoformat(),
            )
            return None
        return end
