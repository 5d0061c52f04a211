"""Tests for AvailabilityResolver over in-memory blocks and a mocked Booking Store."""
import asyncio
import datetime as _dt
import unittest
from unittest.mock import AsyncMock

from availability_engine.clients.booking.providers import NoOpBookingStore
from availability_engine.config import ScheduleConfig
from availability_engine.core.exceptions import BookingStoreError, InvalidRange, InvalidSlotLabel
from availability_engine.scheduling import AuthenticatedActor, SlotCatalog
from availability_engine.scheduling.commands import BlockTimeSlot
from availability_engine.services import AdminCommandHandler, AvailabilityResolver
from availability_engine.stores import InMemoryBlockStore

TODAY = _dt.date(2026, 10, 19)
MONDAY = _dt.date(2026, 11, 2)
SATURDAY = _dt.date(2026, 11, 7)
SUNDAY = _dt.date(2026, 11, 8)
SMALL_WEEKDAY = ["6:30 PM", "7:00 PM", "7:30 PM", "8:00 PM", "8:30 PM"]


def _run(coro):
    return asyncio.run(coro)


def _setup(weekday=None, booking=None, max_range_days=366):
    config = ScheduleConfig()
    catalog = SlotCatalog(weekday or config.weekday_slots, config.weekend_slots)
    store = InMemoryBlockStore(catalog, today=lambda: TODAY)
    resolver = AvailabilityResolver(
        catalog, store, booking or NoOpBookingStore(), max_range_days=max_range_days
    )
    return catalog, store, resolver


class TestResolve(unittest.TestCase):
    def test_weekend_without_blocks_offers_every_slot(self) -> None:
        catalog, _, resolver = _setup()
        snapshot = _run(resolver.resolve_date(SATURDAY))
        self.assertEqual(len(snapshot.available_slot_labels), 19)
        self.assertEqual(snapshot.available_slot_labels, catalog.labels_for(SATURDAY))
        self.assertFalse(snapshot.is_fully_blocked)
        self.assertEqual(snapshot.blocked_slot_labels, frozenset())

    def test_two_slot_block_command_leaves_seventeen(self) -> None:
        catalog, store, resolver = _setup()
        handler = AdminCommandHandler(store, today=lambda: TODAY)
        actor = AuthenticatedActor(actor_id="staff-7")
        result = _run(handler.handle(BlockTimeSlot(SATURDAY, ("11:00 AM", "11:30 AM")), actor))

        self.assertTrue(result.ok)
        self.assertEqual([(r.slot_label, r.ok) for r in result.slot_results], [("11:00 AM", True), ("11:30 AM", True)])
        snapshot = _run(resolver.resolve_date(SATURDAY))
        self.assertEqual(len(snapshot.available_slot_labels), 17)
        self.assertEqual(snapshot.available_slot_labels, catalog.labels_for(SATURDAY)[2:])
        self.assertEqual(snapshot.blocked_slot_labels, {"11:00 AM", "11:30 AM"})

    def test_available_is_ordered_subset_of_catalog(self) -> None:
        catalog, store, resolver = _setup()
        _run(store.add_slot_block(MONDAY, "8:00 PM"))
        _run(store.add_recurring_block(1, "9:00 PM", "10:00 PM", _dt.date(2027, 1, 1)))
        for snapshot in _run(resolver.resolve(MONDAY, SUNDAY)):
            labels = catalog.labels_for(snapshot.date)
            positions = [labels.index(l) for l in snapshot.available_slot_labels]
            self.assertEqual(positions, sorted(positions))
            self.assertTrue(set(snapshot.available_slot_labels).isdisjoint(snapshot.blocked_slot_labels))

    def test_full_day_dominates_everything(self) -> None:
        catalog, store, resolver = _setup()
        _run(store.add_slot_block(MONDAY, "7:00 PM"))
        _run(store.add_full_day_block(MONDAY, "Closed"))
        _run(store.add_full_day_block(MONDAY, "Closed"))
        snapshot = _run(resolver.resolve_date(MONDAY))
        self.assertTrue(snapshot.is_fully_blocked)
        self.assertEqual(snapshot.available_slot_labels, ())
        self.assertEqual(snapshot.blocked_slot_labels, frozenset(catalog.labels_for(MONDAY)))

    def test_slot_block_round_trip_restores_availability(self) -> None:
        _, store, resolver = _setup()
        before = _run(resolver.resolve_date(MONDAY))
        _run(store.add_slot_block(MONDAY, "7:00 PM"))
        self.assertNotIn("7:00 PM", _run(resolver.resolve_date(MONDAY)).available_slot_labels)
        _run(store.remove_slot_block(MONDAY, "7:00 PM"))
        self.assertEqual(_run(resolver.resolve_date(MONDAY)), before)

    def test_recurring_window(self) -> None:
        _, store, resolver = _setup(weekday=SMALL_WEEKDAY)
        until = _dt.date(2027, 2, 1)
        _run(store.add_recurring_block(1, "6:30 PM", "8:00 PM", until, effective_from=MONDAY))
        self.assertEqual(_run(resolver.resolve_date(MONDAY)).available_slot_labels, ("8:30 PM",))
        self.assertEqual(_run(resolver.resolve_date(until)).available_slot_labels, ("8:30 PM",))
        after = until + _dt.timedelta(days=7)
        self.assertEqual(_run(resolver.resolve_date(after)).available_slot_labels, tuple(SMALL_WEEKDAY))

    def test_overlapping_mechanisms_reported_once(self) -> None:
        booking = AsyncMock()
        booking.occupied_slots_in = AsyncMock(return_value={MONDAY: {"7:00 PM", "Noon"}})
        _, store, resolver = _setup(weekday=SMALL_WEEKDAY, booking=booking)
        _run(store.add_slot_block(MONDAY, "7:00 PM"))
        _run(store.add_recurring_block(1, "6:30 PM", "7:00 PM", _dt.date(2027, 2, 1)))
        snapshot = _run(resolver.resolve_date(MONDAY))
        self.assertEqual(snapshot.blocked_slot_labels, {"6:30 PM", "7:00 PM"})
        self.assertEqual(snapshot.available_slot_labels, ("7:30 PM", "8:00 PM", "8:30 PM"))

    def test_range_is_batched(self) -> None:
        booking = AsyncMock()
        booking.occupied_slots_in = AsyncMock(return_value={})
        _, store, resolver = _setup(booking=booking)
        snapshots = _run(resolver.resolve(MONDAY, MONDAY + _dt.timedelta(days=60)))
        self.assertEqual(len(snapshots), 61)
        self.assertEqual([s.date for s in snapshots], sorted(s.date for s in snapshots))
        booking.occupied_slots_in.assert_awaited_once_with(MONDAY, MONDAY + _dt.timedelta(days=60))

    def test_iteration_crosses_dst_change(self) -> None:
        _, _, resolver = _setup()
        snapshots = _run(resolver.resolve(_dt.date(2026, 10, 31), _dt.date(2026, 11, 2)))
        self.assertEqual(
            [s.date for s in snapshots],
            [_dt.date(2026, 10, 31), _dt.date(2026, 11, 1), _dt.date(2026, 11, 2)],
        )

    def test_inverted_range(self) -> None:
        _, _, resolver = _setup()
        with self.assertRaises(InvalidRange):
            _run(resolver.resolve(SUNDAY, MONDAY))

    def test_range_too_long(self) -> None:
        _, _, resolver = _setup(max_range_days=31)
        with self.assertRaises(InvalidRange) as ctx:
            _run(resolver.resolve(MONDAY, MONDAY + _dt.timedelta(days=31)))
        self.assertEqual(ctx.exception.details["max_range_days"], 31)

    def test_booking_store_failure_propagates(self) -> None:
        booking = AsyncMock()
        booking.occupied_slots_in = AsyncMock(side_effect=BookingStoreError("down"))
        _, _, resolver = _setup(booking=booking)
        with self.assertRaises(BookingStoreError):
            _run(resolver.resolve_date(MONDAY))


class TestQueries(unittest.TestCase):
    def test_is_slot_available(self) -> None:
        _, store, resolver = _setup()
        _run(store.add_slot_block(MONDAY, "7:00 PM"))
        self.assertFalse(_run(resolver.is_slot_available(MONDAY, "7:00 PM")))
        self.assertTrue(_run(resolver.is_slot_available(MONDAY, "7:30 PM")))

    def test_is_slot_available_unknown_label(self) -> None:
        _, _, resolver = _setup()
        with self.assertRaises(InvalidSlotLabel):
            _run(resolver.is_slot_available(SATURDAY, "10:30 PM"))

    def test_blocked_times_merges_slot_and_recurring_blocks(self) -> None:
        _, store, resolver = _setup(weekday=SMALL_WEEKDAY)
        _run(store.add_slot_block(MONDAY, "8:30 PM"))
        _run(store.add_recurring_block(1, "6:30 PM", "7:00 PM", _dt.date(2026, 11, 9)))
        blocked = _run(resolver.blocked_times(MONDAY, _dt.date(2026, 11, 9)))
        self.assertEqual(
            blocked,
            {
                MONDAY: ["6:30 PM", "7:00 PM", "8:30 PM"],
                _dt.date(2026, 11, 9): ["6:30 PM", "7:00 PM"],
            },
        )

    def test_blocked_days(self) -> None:
        _, store, resolver = _setup()
        _run(store.add_full_day_block(SUNDAY))
        _run(store.add_full_day_block(MONDAY))
        self.assertEqual(_run(resolver.blocked_days(MONDAY, SUNDAY)), [MONDAY, SUNDAY])


if __name__ == "__main__":
    unittest.main()
