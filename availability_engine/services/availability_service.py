"""AvailabilityResolver: catalog minus full-day, slot, recurring and booked exclusions."""
from __future__ import annotations

import asyncio
import datetime as _dt
import logging
from typing import Dict, FrozenSet, List, Mapping, Set

from availability_engine.clients.booking import BaseBookingStore
from availability_engine.core.exceptions import InvalidRange
from availability_engine.scheduling.catalog import SlotCatalog
from availability_engine.scheduling.recurrence import RecurrenceExpander
from availability_engine.scheduling.types import AvailabilitySnapshot, DateRange, RecurringBlock
from availability_engine.stores.base import BaseBlockStore

logger = logging.getLogger(__name__)


class AvailabilityResolver:
    """Read-only; every call recomputes from committed blocks and live occupancy."""

    def __init__(
        self,
        catalog: SlotCatalog,
        block_store: BaseBlockStore,
        booking_store: BaseBookingStore,
        *,
        max_range_days: int = 366,
    ) -> None:
        self._catalog = catalog
        self._blocks = block_store
        self._bookings = booking_store
        self._expander = RecurrenceExpander(catalog)
        self._max_range_days = max_range_days

    async def resolve(self, start: _dt.date, end: _dt.date) -> List[AvailabilitySnapshot]:
        """One snapshot per date in start..end, ascending.

        1. Range read of full-day blocks, slot blocks, active recurring blocks
           and Booking Store occupancy (one query each)
        2. Full-day blocked dates short-circuit: everything blocked, nothing available
        3. Otherwise blocked = slot blocks | recurring expansions | occupied
        4. available = catalog labels not blocked, in catalog order
        """
        days = self._date_range(start, end)
        full_days, slot_blocks, recurring, occupied = await asyncio.gather(
            self._blocks.full_day_blocks_in(days.start, days.end),
            self._blocks.slot_blocks_in(days.start, days.end),
            self._blocks.recurring_blocks_active_in(days.start, days.end),
            self._bookings.occupied_slots_in(days.start, days.end),
        )
        snapshots = [
            self._snapshot(date, date in full_days, slot_blocks, recurring, occupied)
            for date in days
        ]
        logger.debug(
            "AvailabilityResolver: resolved %s..%s (%d days, %d fully blocked)",
            days.start, days.end, len(days), sum(1 for s in snapshots if s.is_fully_blocked),
        )
        return snapshots

    async def resolve_date(self, date: _dt.date) -> AvailabilitySnapshot:
        return (await self.resolve(date, date))[0]

    async def is_slot_available(self, date: _dt.date, slot_label: str) -> bool:
        """Raises InvalidSlotLabel when ``slot_label`` is not offered on ``date``."""
        self._catalog.require_label(date, slot_label)
        snapshot = await self.resolve_date(date)
        return slot_label in snapshot.available_slot_labels

    async def blocked_times(self, start: _dt.date, end: _dt.date) -> Dict[_dt.date, List[str]]:
        """Staff-blocked slots per date (slot blocks and recurring blocks, no bookings).

        Dates without blocked slots are omitted. Full-day blocks are reported
        by ``blocked_days``.
        """
        days = self._date_range(start, end)
        slot_blocks, recurring = await asyncio.gather(
            self._blocks.slot_blocks_in(days.start, days.end),
            self._blocks.recurring_blocks_active_in(days.start, days.end),
        )
        out: Dict[_dt.date, List[str]] = {}
        for date in days:
            blocked = set(slot_blocks.get(date, ())) | self._expand_all(recurring, date)
            labels = self._catalog.order(date, blocked)
            if labels:
                out[date] = list(labels)
        return out

    async def blocked_days(self, start: _dt.date, end: _dt.date) -> List[_dt.date]:
        days = self._date_range(start, end)
        full_days = await self._blocks.full_day_blocks_in(days.start, days.end)
        return sorted(d for d in full_days if d in days)

    def _date_range(self, start: _dt.date, end: _dt.date) -> DateRange:
        days = DateRange(start, end)
        if len(days) > self._max_range_days:
            raise InvalidRange(
                f"Date range of {len(days)} days exceeds the maximum of {self._max_range_days}",
                details={
                    "start_date": start.isoformat(),
                    "end_date": end.isoformat(),
                    "max_range_days": self._max_range_days,
                },
            )
        return days

    def _expand_all(self, recurring: List[RecurringBlock], date: _dt.date) -> Set[str]:
        blocked: Set[str] = set()
        for block in recurring:
            if block.is_active_on(date):
                blocked |= self._expander.expand(block, date)
        return blocked

    def _snapshot(
        self,
        date: _dt.date,
        fully_blocked: bool,
        slot_blocks: Mapping[_dt.date, Set[str]],
        recurring: List[RecurringBlock],
        occupied: Mapping[_dt.date, Set[str]],
    ) -> AvailabilitySnapshot:
        labels = self._catalog.labels_for(date)
        if fully_blocked:
            return AvailabilitySnapshot(
                date=date,
                is_fully_blocked=True,
                blocked_slot_labels=frozenset(labels),
                available_slot_labels=(),
            )
        blocked: FrozenSet[str] = frozenset(
            (set(slot_blocks.get(date, ())) | self._expand_all(recurring, date) | set(occupied.get(date, ())))
            & set(labels)
        )
        return AvailabilitySnapshot(
            date=date,
            is_fully_blocked=False,
            blocked_slot_labels=blocked,
            available_slot_labels=tuple(label for label in labels if label not in blocked),
        )
