"""BaseBlockStore: validation and logging shared by every block store backend.

Public methods validate against the SlotCatalog (labels, recurring ranges)
before delegating to backend hooks, so every backend enforces the same
invariants. Backends implement the ``_``-prefixed hooks and the range reads.
"""
from __future__ import annotations

import datetime as _dt
import logging
import uuid
from abc import ABC, abstractmethod
from typing import Callable, Dict, List, Optional, Set

from availability_engine.core.exceptions import InvalidRange, NotFound
from availability_engine.scheduling.catalog import SlotCatalog
from availability_engine.scheduling.recurrence import RecurrenceExpander
from availability_engine.scheduling.types import (
    AuthenticatedActor,
    FullDayBlock,
    RecurringBlock,
    RecurringBlockId,
    SlotBlock,
)

logger = logging.getLogger(__name__)


def _clean_reason(reason: Optional[str]) -> Optional[str]:
    if reason is None:
        return None
    reason = reason.strip()
    return reason or None


def _actor_id(actor: Optional[AuthenticatedActor]) -> Optional[str]:
    return actor.actor_id if actor is not None else None


class BaseBlockStore(ABC):
    def __init__(
        self,
        catalog: SlotCatalog,
        *,
        today: Optional[Callable[[], _dt.date]] = None,
    ) -> None:
        self.catalog = catalog
        self.expander = RecurrenceExpander(catalog)
        self._today = today or _dt.date.today

    @property
    @abstractmethod
    def backend(self) -> str:
        ...

    # ── Mutations ────────────────────────────────────────────────

    async def add_full_day_block(
        self,
        date: _dt.date,
        reason: Optional[str] = None,
        *,
        actor: Optional[AuthenticatedActor] = None,
    ) -> bool:
        """Block every slot on ``date``. Idempotent; returns True if newly blocked."""
        created = await self._upsert_full_day_block(date, _clean_reason(reason), _actor_id(actor))
        logger.info(
            "BlockStore[%s]: full day %s %s by %s",
            self.backend, date.isoformat(), "blocked" if created else "already blocked", actor or "system",
        )
        return created

    async def remove_full_day_block(self, date: _dt.date) -> bool:
        """Remove the day's block. Returns False (not an error) when there was none."""
        removed = await self._delete_full_day_block(date)
        logger.info("BlockStore[%s]: full day %s unblocked (existed=%s)", self.backend, date.isoformat(), removed)
        return removed

    async def add_slot_block(
        self,
        date: _dt.date,
        slot_label: str,
        reason: Optional[str] = None,
        *,
        actor: Optional[AuthenticatedActor] = None,
    ) -> bool:
        """Block one slot. Raises InvalidSlotLabel for labels outside the date's catalog."""
        self.catalog.require_label(date, slot_label)
        created = await self._upsert_slot_block(date, slot_label, _clean_reason(reason), _actor_id(actor))
        logger.info(
            "BlockStore[%s]: slot %s %s %s by %s",
            self.backend, date.isoformat(), slot_label,
            "blocked" if created else "already blocked", actor or "system",
        )
        return created

    async def remove_slot_block(self, date: _dt.date, slot_label: str) -> bool:
        """Unblock one slot. Raises InvalidSlotLabel for labels outside the date's catalog."""
        self.catalog.require_label(date, slot_label)
        removed = await self._delete_slot_block(date, slot_label)
        logger.info(
            "BlockStore[%s]: slot %s %s unblocked (existed=%s)",
            self.backend, date.isoformat(), slot_label, removed,
        )
        return removed

    async def add_recurring_block(
        self,
        day_of_week: int,
        start_slot_label: str,
        end_slot_label: str,
        effective_until: _dt.date,
        reason: Optional[str] = None,
        *,
        effective_from: Optional[_dt.date] = None,
        actor: Optional[AuthenticatedActor] = None,
    ) -> RecurringBlockId:
        """Store a weekly block. Raises InvalidRange for unknown/inverted slots or windows."""
        self.expander.validate_range(day_of_week, start_slot_label, end_slot_label)
        effective_from = effective_from or self._today()
        if effective_from > effective_until:
            raise InvalidRange(
                f"Recurring block starts {effective_from.isoformat()} "
                f"after it ends {effective_until.isoformat()}",
                details={
                    "effective_from": effective_from.isoformat(),
                    "effective_until": effective_until.isoformat(),
                },
            )
        block = RecurringBlock(
            id=uuid.uuid4(),
            day_of_week=day_of_week,
            start_slot_label=start_slot_label,
            end_slot_label=end_slot_label,
            effective_from=effective_from,
            effective_until=effective_until,
            reason=_clean_reason(reason),
            created_by=_actor_id(actor),
        )
        await self._insert_recurring_block(block)
        logger.info(
            "BlockStore[%s]: recurring block %s day=%d %s..%s %s..%s by %s",
            self.backend, block.id, day_of_week, start_slot_label, end_slot_label,
            effective_from.isoformat(), effective_until.isoformat(), actor or "system",
        )
        return block.id

    async def remove_recurring_block(self, block_id: RecurringBlockId) -> bool:
        removed = await self._delete_recurring_block(block_id)
        logger.info("BlockStore[%s]: recurring block %s removed (existed=%s)", self.backend, block_id, removed)
        return removed

    # ── Reads ────────────────────────────────────────────────────

    async def recurring_blocks_active_on(self, date: _dt.date) -> List[RecurringBlock]:
        blocks = await self.recurring_blocks_active_in(date, date)
        return [b for b in blocks if b.is_active_on(date)]

    async def get_recurring_block(self, block_id: RecurringBlockId) -> RecurringBlock:
        block = await self._fetch_recurring_block(block_id)
        if block is None:
            raise NotFound(f"Recurring block {block_id} not found", details={"id": str(block_id)})
        return block

    @abstractmethod
    async def full_day_blocks_in(self, start: _dt.date, end: _dt.date) -> Set[_dt.date]:
        ...

    @abstractmethod
    async def slot_blocks_in(self, start: _dt.date, end: _dt.date) -> Dict[_dt.date, Set[str]]:
        ...

    @abstractmethod
    async def recurring_blocks_active_in(self, start: _dt.date, end: _dt.date) -> List[RecurringBlock]:
        """Blocks whose effective window overlaps start..end (any day of week)."""

    @abstractmethod
    async def list_full_day_blocks(
        self, start: Optional[_dt.date] = None, end: Optional[_dt.date] = None
    ) -> List[FullDayBlock]:
        ...

    @abstractmethod
    async def list_slot_blocks(
        self, start: Optional[_dt.date] = None, end: Optional[_dt.date] = None
    ) -> List[SlotBlock]:
        ...

    @abstractmethod
    async def list_recurring_blocks(self) -> List[RecurringBlock]:
        ...

    # ── Backend hooks ────────────────────────────────────────────

    @abstractmethod
    async def _upsert_full_day_block(self, date: _dt.date, reason: Optional[str], created_by: Optional[str]) -> bool:
        ...

    @abstractmethod
    async def _delete_full_day_block(self, date: _dt.date) -> bool:
        ...

    @abstractmethod
    async def _upsert_slot_block(
        self, date: _dt.date, slot_label: str, reason: Optional[str], created_by: Optional[str]
    ) -> bool:
        ...

    @abstractmethod
    async def _delete_slot_block(self, date: _dt.date, slot_label: str) -> bool:
        ...

    @abstractmethod
    async def _insert_recurring_block(self, block: RecurringBlock) -> None:
        ...

    @abstractmethod
    async def _delete_recurring_block(self, block_id: RecurringBlockId) -> bool:
        ...

    @abstractmethod
    async def _fetch_recurring_block(self, block_id: RecurringBlockId) -> Optional[RecurringBlock]:
        ...
