"""
Unit tests for the to-do list date arithmetic and progress transitions.
"""

import unittest
from datetime import date, datetime

from svarchiv.tasks import (
    build_task,
    calculate_days_until_due,
    calculate_next_due_date,
    get_due_date_text,
    get_repetition_label,
    reset_for_next_cycle,
    sort_by_due_date,
    update_progress,
)


class TestNextDueDate(unittest.TestCase):
    def test_intervals(self) -> None:
        d = date(2026, 10, 19)
        self.assertIsNone(calculate_next_due_date(d, "none"))
        self.assertEqual(calculate_next_due_date(d, "daily"), date(2026, 10, 20))
        self.assertEqual(calculate_next_due_date(d, "every-2-days"), date(2026, 10, 21))
        self.assertEqual(calculate_next_due_date(d, "every-3-days"), date(2026, 10, 22))
        self.assertEqual(calculate_next_due_date(d, "weekly"), date(2026, 10, 26))
        self.assertEqual(calculate_next_due_date(d, "monthly"), date(2026, 11, 19))

    def test_monthly_clamps_and_rolls_year(self) -> None:
        self.assertEqual(calculate_next_due_date(date(2026, 1, 31), "monthly"), date(2026, 2, 28))
        self.assertEqual(calculate_next_due_date(date(2028, 1, 31), "monthly"), date(2028, 2, 29))
        self.assertEqual(calculate_next_due_date(date(2026, 12, 15), "monthly"), date(2027, 1, 15))

    def test_unknown_interval(self) -> None:
        with self.assertRaises(ValueError):
            calculate_next_due_date(date(2026, 1, 1), "yearly")


class TestDueTexts(unittest.TestCase):
    TODAY = date(2026, 10, 19)

    def test_days_until_due(self) -> None:
        self.assertEqual(calculate_days_until_due(date(2026, 10, 22), self.TODAY), 3)
        self.assertEqual(calculate_days_until_due(date(2026, 10, 18), self.TODAY), -1)

    def test_due_text(self) -> None:
        self.assertEqual(get_due_date_text(date(2026, 10, 18), self.TODAY), "Überfällig seit 1 Tag")
        self.assertEqual(get_due_date_text(date(2026, 10, 16), self.TODAY), "Überfällig seit 3 Tagen")
        self.assertEqual(get_due_date_text(self.TODAY, self.TODAY), "Heute fällig")
        self.assertEqual(get_due_date_text(date(2026, 10, 20), self.TODAY), "Morgen fällig")
        self.assertEqual(get_due_date_text(date(2026, 10, 25), self.TODAY), "Fällig in 6 Tagen")

    def test_labels(self) -> None:
        self.assertEqual(get_repetition_label("none"), "Keine Wiederholung")
        self.assertEqual(get_repetition_label("weekly"), "Wöchentlich")


class TestTaskState(unittest.TestCase):
    NOW = datetime(2026, 10, 19, 12, 0)

    def test_build_task(self) -> None:
        t = build_task("  Plakate drucken ", date(2026, 10, 20), "weekly", self.NOW, task_id="t1")

        self.assertEqual(t.id, "t1")
        self.assertEqual(t.title, "Plakate drucken")
        self.assertEqual(t.progress, 0)
        self.assertFalse(t.completed)
        self.assertEqual(t.created_at, self.NOW)
        self.assertEqual(t.next_due_date, date(2026, 10, 27))

    def test_build_task_requires_title(self) -> None:
        with self.assertRaises(ValueError):
            build_task("   ", date(2026, 10, 20), "none", self.NOW)

    def test_generated_id(self) -> None:
        t = build_task("A", date(2026, 10, 20), "none", self.NOW)
        self.assertTrue(t.id.startswith("task-"))
        self.assertIsNone(t.next_due_date)

    def test_progress(self) -> None:
        t = build_task("A", date(2026, 10, 20), "daily", self.NOW)

        t2 = update_progress(t, 2)
        self.assertEqual(t2.progress, 2)
        self.assertFalse(t2.completed)

        t3 = update_progress(t2, 3)
        self.assertTrue(t3.completed)
        self.assertEqual(t3.next_due_date, date(2026, 10, 21))

        with self.assertRaises(ValueError):
            update_progress(t, 4)

    def test_reset_for_next_cycle(self) -> None:
        t = update_progress(build_task("A", date(2026, 10, 20), "weekly", self.NOW), 3)
        r = reset_for_next_cycle(t)

        self.assertEqual(r.progress, 0)
        self.assertFalse(r.completed)
        self.assertEqual(r.due_date, date(2026, 10, 27))
        self.assertEqual(r.next_due_date, date(2026, 11, 3))

    def test_reset_non_repeating_fails(self) -> None:
        t = build_task("A", date(2026, 10, 20), "none", self.NOW)
        with self.assertRaises(ValueError):
            reset_for_next_cycle(t)

    def test_sort_by_due_date(self) -> None:
        later = build_task("B", date(2026, 11, 1), "none", self.NOW)
        sooner = build_task("A", date(2026, 10, 21), "none", self.NOW)
        self.assertEqual([t.title for t in sort_by_due_date([later, sooner])], ["A", "B"])


if __name__ == "__main__":
    unittest.main()
