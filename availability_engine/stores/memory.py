"""In-process block store for local development and tests.

Each mutation is a single dict operation with no await in between, so it is
atomic with respect to other coroutines on the same event loop. State is lost
on restart; production uses SqlBlockStore.
"""
from __future__ import annotations

import datetime as _dt
from collections import defaultdict
from dataclasses import replace
from typing import Dict, List, Optional, Set, Tuple

from availability_engine.scheduling.types import (
    FullDayBlock,
    RecurringBlock,
    RecurringBlockId,
    SlotBlock,
)
from availability_engine.stores.base import BaseBlockStore


def _in(date: _dt.date, start: Optional[_dt.date], end: Optional[_dt.date]) -> bool:
    return (start is None or date >= start) and (end is None or date <= end)


class InMemoryBlockStore(BaseBlockStore):
    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._full_days: Dict[_dt.date, FullDayBlock] = {}
        self._slots: Dict[Tuple[_dt.date, str], SlotBlock] = {}
        self._recurring: Dict[RecurringBlockId, RecurringBlock] = {}

    @property
    def backend(self) -> str:
        return "memory"

    async def full_day_blocks_in(self, start: _dt.date, end: _dt.date) -> Set[_dt.date]:
        return {d for d in self._full_days if start <= d <= end}

    async def slot_blocks_in(self, start: _dt.date, end: _dt.date) -> Dict[_dt.date, Set[str]]:
        grouped: Dict[_dt.date, Set[str]] = defaultdict(set)
        for date, label in self._slots:
            if start <= date <= end:
                grouped[date].add(label)
        return dict(grouped)

    async def recurring_blocks_active_in(self, start: _dt.date, end: _dt.date) -> List[RecurringBlock]:
        return [b for b in self._recurring.values() if b.overlaps(start, end)]

    async def list_full_day_blocks(
        self, start: Optional[_dt.date] = None, end: Optional[_dt.date] = None
    ) -> List[FullDayBlock]:
        return sorted(
            (b for d, b in self._full_days.items() if _in(d, start, end)),
            key=lambda b: b.date,
        )

    async def list_slot_blocks(
        self, start: Optional[_dt.date] = None, end: Optional[_dt.date] = None
    ) -> List[SlotBlock]:
        blocks = [b for (d, _), b in self._slots.items() if _in(d, start, end)]
        return sorted(blocks, key=lambda b: (b.date, self.catalog.ordinal_of(b.date, b.slot_label) or 0))

    async def list_recurring_blocks(self) -> List[RecurringBlock]:
        return sorted(self._recurring.values(), key=lambda b: (b.day_of_week, b.effective_from))

    async def _upsert_full_day_block(self, date: _dt.date, reason: Optional[str], created_by: Optional[str]) -> bool:
        existing = self._full_days.get(date)
        if existing is not None:
            if reason:
                self._full_days[date] = replace(existing, reason=reason)
            return False
        self._full_days[date] = FullDayBlock(date=date, reason=reason, created_by=created_by)
        return True

    async def _delete_full_day_block(self, date: _dt.date) -> bool:
        return self._full_days.pop(date, None) is not None

    async def _upsert_slot_block(
        self, date: _dt.date, slot_label: str, reason: Optional[str], created_by: Optional[str]
    ) -> bool:
        key = (date, slot_label)
        existing = self._slots.get(key)
        if existing is not None:
            if reason:
                self._slots[key] = replace(existing, reason=reason)
            return False
        self._slots[key] = SlotBlock(date=date, slot_label=slot_label, reason=reason, created_by=created_by)
        return True

    async def _delete_slot_block(self, date: _dt.date, slot_label: str) -> bool:
        return self._slots.pop((date, slot_label), None) is not None

    async def _insert_recurring_block(self, block: RecurringBlock) -> None:
        self._recurring[block.id] = block

    async def _delete_recurring_block(self, block_id: RecurringBlockId) -> bool:
        return self._recurring.pop(block_id, None) is not None

    async def _fetch_recurring_block(self, block_id: RecurringBlockId) -> Optional[RecurringBlock]:
        return self._recurring.get(block_id)
