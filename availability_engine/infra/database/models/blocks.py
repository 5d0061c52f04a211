"""Block ORM models: full-day, single-slot and weekly recurring blocks."""
from __future__ import annotations

import datetime as _dt
import uuid
from typing import Optional

from sqlalchemy import CheckConstraint, Date, Index, SmallInteger, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from availability_engine.infra.database.models.base import Base, TimestampMixin, _uuid_pk
from availability_engine.scheduling.types import FullDayBlock, RecurringBlock, SlotBlock


class FullDayBlockRecord(Base, TimestampMixin):
    """Every slot on ``date`` is unavailable. At most one row per date."""

    __tablename__ = "full_day_blocks"

    id: Mapped[uuid.UUID] = _uuid_pk()
    date: Mapped[_dt.date] = mapped_column(Date, nullable=False, unique=True)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def to_domain(self) -> FullDayBlock:
        return FullDayBlock(date=self.date, reason=self.reason, created_by=self.created_by)


class SlotBlockRecord(Base, TimestampMixin):
    """One blocked slot on one date; unique per (date, slot_label)."""

    __tablename__ = "slot_blocks"
    __table_args__ = (
        UniqueConstraint("date", "slot_label", name="uq_slot_blocks_date_label"),
        Index("ix_slot_blocks_date", "date"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    date: Mapped[_dt.date] = mapped_column(Date, nullable=False)
    slot_label: Mapped[str] = mapped_column(String(32), nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def to_domain(self) -> SlotBlock:
        return SlotBlock(
            date=self.date,
            slot_label=self.slot_label,
            reason=self.reason,
            created_by=self.created_by,
        )


class RecurringBlockRecord(Base, TimestampMixin):
    """
    Weekly block of the slot range start..end on ``day_of_week``
    (0 = Sunday .. 6 = Saturday) between effective_from and effective_until.
    """

    __tablename__ = "recurring_blocks"
    __table_args__ = (
        CheckConstraint("day_of_week BETWEEN 0 AND 6", name="ck_recurring_blocks_day_of_week"),
        CheckConstraint("effective_from <= effective_until", name="ck_recurring_blocks_window"),
        Index("ix_recurring_blocks_window", "effective_from", "effective_until"),
        Index("ix_recurring_blocks_day_of_week", "day_of_week"),
    )

    id: Mapped[uuid.UUID] = _uuid_pk()
    day_of_week: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    start_slot_label: Mapped[str] = mapped_column(String(32), nullable=False)
    end_slot_label: Mapped[str] = mapped_column(String(32), nullable=False)
    effective_from: Mapped[_dt.date] = mapped_column(Date, nullable=False)
    effective_until: Mapped[_dt.date] = mapped_column(Date, nullable=False)
    reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_by: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    def to_domain(self) -> RecurringBlock:
        return RecurringBlock(
            id=self.id,
            day_of_week=self.day_of_week,
            start_slot_label=self.start_slot_label,
            end_slot_label=self.end_slot_label,
            effective_from=self.effective_from,
            effective_until=self.effective_until,
            reason=self.reason,
            created_by=self.created_by,
        )
