"""Block repositories: idempotent upserts, deletes and range reads.

Upserts use PostgreSQL ``INSERT ... ON CONFLICT`` so two concurrent admin
actions on the same date/slot serialize in the database instead of racing.
"""
from __future__ import annotations

import datetime as _dt
from collections import defaultdict
from typing import Any, Dict, List, Optional, Set

from sqlalchemy import delete as sa_delete, func, literal_column, select
from sqlalchemy.dialects.postgresql import insert as pg_insert

from availability_engine.infra.database.models.blocks import (
    FullDayBlockRecord,
    RecurringBlockRecord,
    SlotBlockRecord,
)
from availability_engine.infra.database.repositories.base import BaseRepository


def _within(stmt, column, start: Optional[_dt.date], end: Optional[_dt.date]):
    if start is not None:
        stmt = stmt.where(column >= start)
    if end is not None:
        stmt = stmt.where(column <= end)
    return stmt


class FullDayBlockRepository(BaseRepository[FullDayBlockRecord]):
    model = FullDayBlockRecord

    async def upsert(self, date: _dt.date, reason: Optional[str], created_by: Optional[str]) -> bool:
        """Insert or keep the day's block; a non-empty reason replaces the stored one.

        Returns True when a new row was inserted.
        """
        table = FullDayBlockRecord.__table__
        stmt = pg_insert(table).values(date=date, reason=reason, created_by=created_by)
        stmt = stmt.on_conflict_do_update(
            index_elements=[table.c.date],
            set_={
                "reason": func.coalesce(stmt.excluded.reason, table.c.reason),
                "updated_at": func.now(),
            },
        ).returning(literal_column("(xmax = 0)").label("inserted"))
        result = await self.session.execute(stmt)
        return bool(result.scalar_one())

    async def delete_by_date(self, date: _dt.date) -> int:
        stmt = (
            sa_delete(FullDayBlockRecord)
            .where(FullDayBlockRecord.date == date)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def dates_in(self, start: _dt.date, end: _dt.date) -> Set[_dt.date]:
        stmt = _within(select(FullDayBlockRecord.date), FullDayBlockRecord.date, start, end)
        result = await self.session.execute(stmt)
        return set(result.scalars().all())

    async def list_in(
        self,
        start: Optional[_dt.date] = None,
        end: Optional[_dt.date] = None,
    ) -> List[FullDayBlockRecord]:
        stmt = _within(select(FullDayBlockRecord), FullDayBlockRecord.date, start, end)
        result = await self.session.execute(stmt.order_by(FullDayBlockRecord.date))
        return list(result.scalars().all())


class SlotBlockRepository(BaseRepository[SlotBlockRecord]):
    model = SlotBlockRecord

    async def upsert(
        self,
        date: _dt.date,
        slot_label: str,
        reason: Optional[str],
        created_by: Optional[str],
    ) -> bool:
        """Insert or keep the slot block. Returns True when a new row was inserted."""
        table = SlotBlockRecord.__table__
        stmt = pg_insert(table).values(
            date=date, slot_label=slot_label, reason=reason, created_by=created_by
        )
        stmt = stmt.on_conflict_do_update(
            constraint="uq_slot_blocks_date_label",
            set_={
                "reason": func.coalesce(stmt.excluded.reason, table.c.reason),
                "updated_at": func.now(),
            },
        ).returning(literal_column("(xmax = 0)").label("inserted"))
        result = await self.session.execute(stmt)
        return bool(result.scalar_one())

    async def delete_slot(self, date: _dt.date, slot_label: str) -> int:
        stmt = (
            sa_delete(SlotBlockRecord)
            .where(SlotBlockRecord.date == date)
            .where(SlotBlockRecord.slot_label == slot_label)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(stmt)
        return result.rowcount

    async def labels_in(self, start: _dt.date, end: _dt.date) -> Dict[_dt.date, Set[str]]:
        stmt = _within(
            select(SlotBlockRecord.date, SlotBlockRecord.slot_label),
            SlotBlockRecord.date, start, end,
        )
        result = await self.session.execute(stmt)
        grouped: Dict[_dt.date, Set[str]] = defaultdict(set)
        for date, label in result.all():
            grouped[date].add(label)
        return dict(grouped)

    async def list_in(
        self,
        start: Optional[_dt.date] = None,
        end: Optional[_dt.date] = None,
    ) -> List[SlotBlockRecord]:
        stmt = _within(select(SlotBlockRecord), SlotBlockRecord.date, start, end)
        result = await self.session.execute(
            stmt.order_by(SlotBlockRecord.date, SlotBlockRecord.created_at)
        )
        return list(result.scalars().all())


class RecurringBlockRepository(BaseRepository[RecurringBlockRecord]):
    model = RecurringBlockRecord

    async def create_block(self, data: Dict[str, Any]) -> RecurringBlockRecord:
        return await self.create(data)

    async def active_in(self, start: _dt.date, end: _dt.date) -> List[RecurringBlockRecord]:
        """Blocks whose effective window overlaps start..end."""
        stmt = (
            select(RecurringBlockRecord)
            .where(RecurringBlockRecord.effective_from <= end)
            .where(RecurringBlockRecord.effective_until >= start)
            .order_by(RecurringBlockRecord.day_of_week, RecurringBlockRecord.effective_from)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def list_all(self) -> List[RecurringBlockRecord]:
        stmt = select(RecurringBlockRecord).order_by(
            RecurringBlockRecord.day_of_week, RecurringBlockRecord.effective_from
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())
