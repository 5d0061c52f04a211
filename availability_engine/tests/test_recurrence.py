"""Tests for RecurrenceExpander and RecurringBlock windows."""
import datetime as _dt
import unittest
import uuid

from availability_engine.core.exceptions import InvalidDate, InvalidRange
from availability_engine.scheduling import RecurrenceExpander, RecurringBlock, SlotCatalog

WEEKDAY = ["6:30 PM", "7:00 PM", "7:30 PM", "8:00 PM", "8:30 PM"]
WEEKEND = ["11:00 AM", "11:30 AM", "12:00 PM", "12:30 PM"]

FIRST_MONDAY = _dt.date(2026, 11, 2)
UNTIL = _dt.date(2027, 2, 1)  # a Monday, 13 weeks later


def _monday_block(**kwargs) -> RecurringBlock:
    defaults = dict(
        id=uuid.uuid4(),
        day_of_week=1,
        start_slot_label="6:30 PM",
        end_slot_label="8:00 PM",
        effective_from=FIRST_MONDAY,
        effective_until=UNTIL,
        reason="Staff training",
    )
    defaults.update(kwargs)
    return RecurringBlock(**defaults)


class TestExpand(unittest.TestCase):
    def setUp(self) -> None:
        self.catalog = SlotCatalog(WEEKDAY, WEEKEND)
        self.expander = RecurrenceExpander(self.catalog)

    def test_every_monday_in_window(self) -> None:
        block = _monday_block()
        monday = FIRST_MONDAY
        while monday <= UNTIL:
            self.assertEqual(
                self.expander.expand(block, monday),
                {"6:30 PM", "7:00 PM", "7:30 PM", "8:00 PM"},
            )
            monday += _dt.timedelta(days=7)

    def test_first_monday_after_expiry_not_active(self) -> None:
        block = _monday_block()
        after = UNTIL + _dt.timedelta(days=7)
        self.assertFalse(block.is_active_on(after))
        with self.assertRaises(InvalidDate):
            self.expander.expand(block, after)

    def test_wrong_weekday_rejected(self) -> None:
        with self.assertRaises(InvalidDate):
            self.expander.expand(_monday_block(), FIRST_MONDAY + _dt.timedelta(days=1))

    def test_single_slot_range(self) -> None:
        block = _monday_block(start_slot_label="8:30 PM", end_slot_label="8:30 PM")
        self.assertEqual(self.expander.expand(block, FIRST_MONDAY), {"8:30 PM"})

    def test_weekend_block_uses_weekend_schedule(self) -> None:
        sunday = _dt.date(2026, 11, 8)
        block = _monday_block(day_of_week=0, start_slot_label="11:30 AM", end_slot_label="12:30 PM")
        self.assertEqual(self.expander.expand(block, sunday), {"11:30 AM", "12:00 PM", "12:30 PM"})

    def test_labels_missing_from_reconfigured_catalog(self) -> None:
        block = _monday_block(start_slot_label="5:00 PM")
        with self.assertLogs("availability_engine.scheduling.recurrence", level="WARNING"):
            self.assertEqual(self.expander.expand(block, FIRST_MONDAY), frozenset())


class TestValidateRange(unittest.TestCase):
    def setUp(self) -> None:
        self.expander = RecurrenceExpander(SlotCatalog(WEEKDAY, WEEKEND))

    def test_valid_range_returns_ordinals(self) -> None:
        self.assertEqual(self.expander.validate_range(1, "7:00 PM", "8:00 PM"), (1, 3))

    def test_inverted_range(self) -> None:
        with self.assertRaises(InvalidRange):
            self.expander.validate_range(1, "8:00 PM", "7:00 PM")

    def test_weekday_label_on_weekend_day(self) -> None:
        with self.assertRaises(InvalidRange) as ctx:
            self.expander.validate_range(6, "6:30 PM", "7:00 PM")
        self.assertEqual(ctx.exception.details["schedule"], "weekend")
        self.assertEqual(ctx.exception.details["valid_labels"], WEEKEND)

    def test_day_of_week_out_of_range(self) -> None:
        with self.assertRaises(InvalidRange):
            self.expander.validate_range(7, "6:30 PM", "7:00 PM")

    def test_boolean_day_of_week_rejected(self) -> None:
        for flag in (True, False):
            with self.assertRaises(InvalidRange):
                self.expander.validate_range(flag, "6:30 PM", "7:00 PM")


class TestRecurringWindow(unittest.TestCase):
    def test_overlaps(self) -> None:
        block = _monday_block()
        self.assertTrue(block.overlaps(UNTIL, UNTIL + _dt.timedelta(days=30)))
        self.assertFalse(block.overlaps(UNTIL + _dt.timedelta(days=1), UNTIL + _dt.timedelta(days=30)))
        self.assertFalse(block.overlaps(_dt.date(2026, 10, 1), FIRST_MONDAY - _dt.timedelta(days=1)))


if __name__ == "__main__":
    unittest.main()
