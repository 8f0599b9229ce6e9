"""
Unit tests for ServiceFactory and the template library.

Tests shared dependency wiring and seeding practices from a template.
"""
import os
import tempfile
import unittest
from datetime import date, time

from practice_planner.models import PeriodTemplate, PracticeTemplate, ScheduleSpec
from practice_planner.services import (
    EditorCommandManager, JsonPracticeStore, MoveActivityCommand, PracticeDraft,
    PracticeStore, ServiceFactory
)


class TestServiceFactory(unittest.TestCase):
    """Test cases for ServiceFactory."""

    def setUp(self) -> None:
        self.factory = ServiceFactory()

    def test_singletons_are_shared(self) -> None:
        suite = self.factory.create_complete_service_suite()

        self.assertIs(suite["store"], self.factory.get_store())
        self.assertIs(suite["timeline"], self.factory.get_timeline())
        self.assertIs(suite["coordinator"].store, suite["store"])
        self.assertIs(suite["coordinator"].expander, suite["expander"])
        self.assertIsInstance(suite["store"], PracticeStore)
        self.assertNotIsInstance(suite["store"], JsonPracticeStore)

    def test_data_file_selects_json_store(self) -> None:
        with tempfile.TemporaryDirectory() as temp_dir:
            factory = ServiceFactory(data_file=os.path.join(temp_dir, "practices.json"))
            self.assertIsInstance(factory.get_store(), JsonPracticeStore)

    def test_configure_custom_store(self) -> None:
        store = PracticeStore()
        self.factory.configure_custom_store(store)

        self.assertIs(self.factory.create_series_coordinator().store, store)

    def test_template_seeds_series_and_draft(self) -> None:
        template = PracticeTemplate(
            name="Tuesday session",
            periods=[
                PeriodTemplate(name="Warm-up", duration=10),
                PeriodTemplate(name="Small-sided games", duration=35),
            ],
        )
        self.assertEqual(template.duration, 45)

        coordinator = self.factory.create_series_coordinator()
        spec = ScheduleSpec.weekly(date(2024, 1, 1), date(2024, 1, 31), ["Tue"], time(18, 0))
        practices = coordinator.schedule(spec, template.instantiate())

        self.assertEqual(len(practices), 5)
        self.assertTrue(all(p.duration == 45 for p in practices))

        draft = self.factory.create_draft(practices[0])
        manager = self.factory.create_command_manager(draft)
        self.assertIsInstance(draft, PracticeDraft)
        self.assertIsInstance(manager, EditorCommandManager)
        self.assertTrue(manager.execute_command(MoveActivityCommand(draft, 1, 0)))
        self.assertEqual(draft.activities[0].name, "Small-sided games")
        # the draft is not saved until the caller writes it
        stored = self.factory.get_store().get_instance(practices[0].id)
        self.assertEqual(stored.activities[0].name, "Warm-up")


if __name__ == "__main__":
    unittest.main()
