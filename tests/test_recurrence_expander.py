import unittest
from datetime import date, datetime, time, timedelta

from practice_planner.models import ScheduleSpec, ScheduleType, RepeatPattern, Weekday
from practice_planner.services import RecurrenceExpander


class RecurrenceExpanderTests(unittest.TestCase):
    def setUp(self) -> None:
        self.expander = RecurrenceExpander()

    def test_single_schedule_yields_start_date(self) -> None:
        spec = ScheduleSpec.single(date(2024, 3, 5), time(9, 0))
        self.assertEqual(self.expander.expand(spec), [date(2024, 3, 5)])
        self.assertEqual(self.expander.count(spec), 1)

    def test_daily_schedule_is_inclusive(self) -> None:
        spec = ScheduleSpec.daily(date(2024, 1, 1), date(2024, 1, 5))
        dates = self.expander.expand(spec)

        self.assertEqual(self.expander.count(spec), 5)
        self.assertEqual(dates, [date(2024, 1, d) for d in range(1, 6)])

    def test_daily_same_day_yields_one_date(self) -> None:
        spec = ScheduleSpec.daily(date(2024, 6, 1), date(2024, 6, 1))
        self.assertEqual(self.expander.expand(spec), [date(2024, 6, 1)])
        self.assertEqual(self.expander.count(spec), 1)

    def test_daily_count_matches_day_span(self) -> None:
        start = date(2024, 2, 20)
        for span in (0, 1, 9, 30, 400):
            end = start + timedelta(days=span)
            spec = ScheduleSpec.daily(start, end)
            self.assertEqual(self.expander.count(spec), span + 1)
            self.assertEqual(len(self.expander.expand(spec)), span + 1)

    def test_daily_crosses_month_and_leap_day(self) -> None:
        spec = ScheduleSpec.daily(date(2024, 2, 28), date(2024, 3, 1))
        self.assertEqual(
            self.expander.expand(spec),
            [date(2024, 2, 28), date(2024, 2, 29), date(2024, 3, 1)],
        )

    def test_weekly_keeps_selected_weekdays(self) -> None:
        spec = ScheduleSpec.weekly(date(2024, 1, 1), date(2024, 1, 14), ["Monday", "Wednesday"])
        dates = self.expander.expand(spec)

        self.assertEqual(dates, [date(2024, 1, 1), date(2024, 1, 3), date(2024, 1, 8), date(2024, 1, 10)])
        self.assertEqual(self.expander.count(spec), 4)

    def test_weekly_count_matches_brute_force(self) -> None:
        start = date(2024, 3, 7)
        end = date(2024, 5, 19)
        days = {Weekday.TUESDAY, Weekday.SATURDAY, Weekday.SUNDAY}
        spec = ScheduleSpec.weekly(start, end, days)

        expected = [
            start + timedelta(days=i)
            for i in range((end - start).days + 1)
            if Weekday((start + timedelta(days=i)).weekday()) in days
        ]
        self.assertEqual(self.expander.expand(spec), expected)
        self.assertEqual(self.expander.count(spec), len(expected))

    def test_weekly_without_days_is_empty(self) -> None:
        spec = ScheduleSpec.weekly(date(2024, 1, 1), date(2024, 1, 31), [])
        self.assertEqual(self.expander.expand(spec), [])
        self.assertEqual(self.expander.count(spec), 0)

    def test_inverted_range_is_empty(self) -> None:
        daily = ScheduleSpec.daily(date(2024, 1, 10), date(2024, 1, 1))
        weekly = ScheduleSpec.weekly(date(2024, 1, 10), date(2024, 1, 1), ["Monday"])

        self.assertEqual(self.expander.expand(daily), [])
        self.assertEqual(self.expander.count(daily), 0)
        self.assertEqual(self.expander.expand(weekly), [])
        self.assertEqual(self.expander.count(weekly), 0)

    def test_recurring_without_end_date_is_empty(self) -> None:
        spec = ScheduleSpec(
            schedule_type=ScheduleType.MULTIPLE,
            repeat_pattern=RepeatPattern.DAILY,
            start_date=date(2024, 1, 1),
        )
        self.assertEqual(self.expander.expand(spec), [])
        self.assertEqual(self.expander.count(spec), 0)

    def test_datetime_bounds_are_normalized_to_whole_days(self) -> None:
        spec = ScheduleSpec.daily(datetime(2024, 1, 1, 18, 30), datetime(2024, 1, 3, 6, 0))
        self.assertEqual(
            self.expander.expand(spec),
            [date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)],
        )
        self.assertEqual(self.expander.count(spec), 3)

    def test_expansion_is_deterministic(self) -> None:
        spec = ScheduleSpec.weekly(date(2024, 1, 1), date(2024, 3, 1), ["Fri", "Mon"])
        self.assertEqual(self.expander.expand(spec), self.expander.expand(spec))

    def test_preview_reports_count_and_iso_dates(self) -> None:
        spec = ScheduleSpec.daily(date(2024, 1, 1), date(2024, 1, 2))
        self.assertEqual(
            self.expander.preview(spec),
            {"count": 2, "dates": ["2024-01-01", "2024-01-02"]},
        )


if __name__ == "__main__":
    unittest.main()
