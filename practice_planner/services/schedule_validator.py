"""
Schedule validation for the Practice Planner application.

This module checks schedule specifications and activity input before they
reach the scheduling engine, reporting problems as field-level messages.
"""
from typing import Dict, Iterable

from ..models import Activity, RepeatPattern, ScheduleSpec
from ..utils import MAX_ACTIVITY_DURATION_MIN, MIN_ACTIVITY_DURATION_MIN, to_date


class ScheduleValidationError(Exception):
    """Raised when a schedule specification fails validation."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__(
            "Schedule validation failed: "
            + "; ".join(f"{name}: {message}" for name, message in self.errors.items())
        )


class ScheduleValidator:
    """
    Field-level validation for the schedule form and activity edits.

    The engine itself tolerates bad input; this validator is what stops a
    coach from submitting it.
    """

    def validate(self, spec: ScheduleSpec) -> Dict[str, str]:
        """
        Validate a schedule specification.

        Args:
            spec: Specification to check

        Returns:
            Mapping of field name to error message (empty if valid)
        """
        errors: Dict[str, str] = {}

        if not spec.is_recurring:
            return errors

        if spec.end_date is None:
            errors["end_date"] = "End date is required for multiple practices"
        elif to_date(spec.start_date) > to_date(spec.end_date):
            errors["end_date"] = "End date must be after start date"

        if spec.repeat_pattern is None:
            errors["repeat_pattern"] = "Choose how often the practice repeats"
        elif spec.repeat_pattern is RepeatPattern.WEEKLY and not spec.practice_days:
            errors["practice_days"] = "Select at least one practice day"

        return errors

    def ensure_valid(self, spec: ScheduleSpec) -> None:
        """
        Validate and raise on failure.

        Raises:
            ScheduleValidationError: If any field is invalid
        """
        errors = self.validate(spec)
        if errors:
            raise ScheduleValidationError(errors)

    def validate_activities(self, activities: Iterable[Activity]) -> Dict[str, str]:
        """
        Validate activity names and durations.

        Returns:
            Mapping of ``activities[i].field`` to error message (empty if valid)
        """
        errors: Dict[str, str] = {}
        for idx, activity in enumerate(activities):
            if not activity.name or not activity.name.strip():
                errors[f"activities[{idx}].name"] = "Activity name is required"
            if not MIN_ACTIVITY_DURATION_MIN <= activity.duration <= MAX_ACTIVITY_DURATION_MIN:
                errors[f"activities[{idx}].duration"] = (
                    f"Duration must be between {MIN_ACTIVITY_DURATION_MIN} "
                    f"and {MAX_ACTIVITY_DURATION_MIN} minutes"
                )
        return errors
