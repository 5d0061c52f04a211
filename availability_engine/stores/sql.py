"""PostgreSQL block store with bounded retry on transient failures."""
from __future__ import annotations

import asyncio
import datetime as _dt
import functools
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, Set, TypeVar, cast

from sqlalchemy.exc import DBAPIError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from availability_engine.core.exceptions import StoreUnavailable
from availability_engine.infra.database.repositories import (
    FullDayBlockRepository,
    RecurringBlockRepository,
    SlotBlockRepository,
)
from availability_engine.scheduling.types import (
    FullDayBlock,
    RecurringBlock,
    RecurringBlockId,
    SlotBlock,
)
from availability_engine.stores.base import BaseBlockStore

logger = logging.getLogger(__name__)

_F = TypeVar("_F", bound=Callable[..., Any])
_RETRYABLE = (OperationalError, InterfaceError, asyncio.TimeoutError, ConnectionError)
_BASE_BACKOFF = 0.2
_MAX_BACKOFF = 2.0


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, _RETRYABLE):
        return True
    return isinstance(exc, DBAPIError) and exc.connection_invalidated


def with_store_retry(func: _F) -> _F:
    """Retry a whole store operation (its own transaction) on transient failures.

    Validation and integrity errors propagate immediately. After
    ``self.max_retries`` retries the last failure is raised as StoreUnavailable;
    the failed transaction was rolled back, so nothing partially applied.
    """

    @functools.wraps(func)
    async def wrapper(self: "SqlBlockStore", *args: Any, **kwargs: Any) -> Any:
        attempts = self.max_retries + 1
        last_exc: BaseException = RuntimeError("unreachable")
        for attempt in range(1, attempts + 1):
            try:
                return await func(self, *args, **kwargs)
            except Exception as exc:
                if not _is_transient(exc):
                    raise
                last_exc = exc
            if attempt < attempts:
                delay = min(_BASE_BACKOFF * (2 ** (attempt - 1)), _MAX_BACKOFF)
                logger.warning(
                    "BlockStore %s attempt %d/%d failed (%s), retry in %.1fs",
                    func.__name__, attempt, attempts, last_exc.__class__.__name__, delay,
                )
                await asyncio.sleep(delay)
        logger.error("BlockStore %s failed after %d attempts: %s", func.__name__, attempts, last_exc)
        raise StoreUnavailable(
            f"Block store operation '{func.__name__.lstrip('_')}' failed after {attempts} attempts",
            cause=last_exc,
        )

    return cast(_F, wrapper)


class SqlBlockStore(BaseBlockStore):
    """Each mutation runs in its own transaction; PostgreSQL is the serialization point."""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *args: Any,
        max_retries: int = 3,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._session_factory = session_factory
        self.max_retries = max_retries

    @property
    def backend(self) -> str:
        return "postgres"

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[AsyncSession]:
        async with self._session_factory() as session:
            async with session.begin():
                yield session

    # ── Reads ────────────────────────────────────────────────────

    @with_store_retry
    async def full_day_blocks_in(self, start: _dt.date, end: _dt.date) -> Set[_dt.date]:
        async with self._transaction() as session:
            return await FullDayBlockRepository(session).dates_in(start, end)

    @with_store_retry
    async def slot_blocks_in(self, start: _dt.date, end: _dt.date) -> Dict[_dt.date, Set[str]]:
        async with self._transaction() as session:
            return await SlotBlockRepository(session).labels_in(start, end)

    @with_store_retry
    async def recurring_blocks_active_in(self, start: _dt.date, end: _dt.date) -> List[RecurringBlock]:
        async with self._transaction() as session:
            rows = await RecurringBlockRepository(session).active_in(start, end)
            return [r.to_domain() for r in rows]

    @with_store_retry
    async def list_full_day_blocks(
        self, start: Optional[_dt.date] = None, end: Optional[_dt.date] = None
    ) -> List[FullDayBlock]:
        async with self._transaction() as session:
            rows = await FullDayBlockRepository(session).list_in(start, end)
            return [r.to_domain() for r in rows]

    @with_store_retry
    async def list_slot_blocks(
        self, start: Optional[_dt.date] = None, end: Optional[_dt.date] = None
    ) -> List[SlotBlock]:
        async with self._transaction() as session:
            rows = await SlotBlockRepository(session).list_in(start, end)
        blocks = [r.to_domain() for r in rows]
        return sorted(blocks, key=lambda b: (b.date, self.catalog.ordinal_of(b.date, b.slot_label) or 0))

    @with_store_retry
    async def list_recurring_blocks(self) -> List[RecurringBlock]:
        async with self._transaction() as session:
            rows = await RecurringBlockRepository(session).list_all()
            return [r.to_domain() for r in rows]

    # ── Backend hooks ────────────────────────────────────────────

    @with_store_retry
    async def _upsert_full_day_block(self, date: _dt.date, reason: Optional[str], created_by: Optional[str]) -> bool:
        async with self._transaction() as session:
            return await FullDayBlockRepository(session).upsert(date, reason, created_by)

    @with_store_retry
    async def _delete_full_day_block(self, date: _dt.date) -> bool:
        async with self._transaction() as session:
            return await FullDayBlockRepository(session).delete_by_date(date) > 0

    @with_store_retry
    async def _upsert_slot_block(
        self, date: _dt.date, slot_label: str, reason: Optional[str], created_by: Optional[str]
    ) -> bool:
        async with self._transaction() as session:
            return await SlotBlockRepository(session).upsert(date, slot_label, reason, created_by)

    @with_store_retry
    async def _delete_slot_block(self, date: _dt.date, slot_label: str) -> bool:
        async with self._transaction() as session:
            return await SlotBlockRepository(session).delete_slot(date, slot_label) > 0

    @with_store_retry
    async def _insert_recurring_block(self, block: RecurringBlock) -> None:
        async with self._transaction() as session:
            await RecurringBlockRepository(session).create_block(
                {
                    "id": block.id,
                    "day_of_week": block.day_of_week,
                    "start_slot_label": block.start_slot_label,
                    "end_slot_label": block.end_slot_label,
                    "effective_from": block.effective_from,
                    "effective_until": block.effective_until,
                    "reason": block.reason,
                    "created_by": block.created_by,
                }
            )

    @with_store_retry
    async def _delete_recurring_block(self, block_id: RecurringBlockId) -> bool:
        async with self._transaction() as session:
            return await RecurringBlockRepository(session).delete(block_id)

    @with_store_retry
    async def _fetch_recurring_block(self, block_id: RecurringBlockId) -> Optional[RecurringBlock]:
        async with self._transaction() as session:
            row = await RecurringBlockRepository(session).get_by_id(block_id)
            return row.to_domain() if row is not None else None
