"""Tests for schedule and activity validation."""

from datetime import date

import pytest

from practice_planner.models import Activity, RepeatPattern, ScheduleSpec, ScheduleType
from practice_planner.services import ScheduleValidationError, ScheduleValidator


@pytest.fixture
def validator():
    return ScheduleValidator()


def test_single_practice_is_always_valid(validator):
    assert validator.validate(ScheduleSpec.single(date(2024, 1, 1))) == {}


def test_valid_weekly_schedule(validator):
    spec = ScheduleSpec.weekly(date(2024, 1, 1), date(2024, 1, 31), ["Tue"])
    assert validator.validate(spec) == {}
    validator.ensure_valid(spec)


def test_same_day_range_is_valid(validator):
    assert validator.validate(ScheduleSpec.daily(date(2024, 1, 1), date(2024, 1, 1))) == {}


def test_missing_end_date(validator):
    spec = ScheduleSpec(
        schedule_type=ScheduleType.MULTIPLE,
        repeat_pattern=RepeatPattern.DAILY,
        start_date=date(2024, 1, 1),
    )
    assert validator.validate(spec) == {"end_date": "End date is required for multiple practices"}


def test_end_before_start(validator):
    spec = ScheduleSpec.daily(date(2024, 1, 10), date(2024, 1, 1))
    assert validator.validate(spec) == {"end_date": "End date must be after start date"}


def test_weekly_without_days(validator):
    spec = ScheduleSpec.weekly(date(2024, 1, 1), date(2024, 1, 31), [])
    assert validator.validate(spec) == {"practice_days": "Select at least one practice day"}


def test_missing_repeat_pattern(validator):
    spec = ScheduleSpec(
        schedule_type=ScheduleType.MULTIPLE,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 2),
    )
    assert "repeat_pattern" in validator.validate(spec)


def test_ensure_valid_raises_with_field_errors(validator):
    spec = ScheduleSpec.weekly(date(2024, 2, 1), date(2024, 1, 1), [])

    with pytest.raises(ScheduleValidationError) as excinfo:
        validator.ensure_valid(spec)

    assert set(excinfo.value.errors) == {"end_date", "practice_days"}
    assert "practice_days" in str(excinfo.value)


def test_validate_activities(validator):
    activities = [
        Activity(name="Warm-up", duration=10),
        Activity(name="  ", duration=10),
        Activity(name="Marathon", duration=181),
        Activity(name="Blink", duration=0),
    ]

    errors = validator.validate_activities(activities)

    assert set(errors) == {
        "activities[1].name",
        "activities[2].duration",
        "activities[3].duration",
    }
    assert errors["activities[2].duration"] == "Duration must be between 1 and 180 minutes"
