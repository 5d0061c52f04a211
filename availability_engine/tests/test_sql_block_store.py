"""Tests for SqlBlockStore wiring and with_store_retry (repositories mocked)."""
import asyncio
import datetime as _dt
import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

from sqlalchemy.exc import IntegrityError, OperationalError

from availability_engine.core.exceptions import InvalidSlotLabel, StoreUnavailable
from availability_engine.scheduling import AuthenticatedActor, SlotCatalog
from availability_engine.stores import SqlBlockStore

WEEKDAY = ["6:30 PM", "7:00 PM", "7:30 PM"]
WEEKEND = ["11:00 AM", "11:30 AM"]
TODAY = _dt.date(2026, 10, 19)
MONDAY = _dt.date(2026, 11, 2)


def _run(coro):
    return asyncio.run(coro)


class _FakeSession:
    """Stands in for AsyncSession and its begin() transaction."""

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def begin(self):
        return self


def _store(max_retries: int = 2) -> SqlBlockStore:
    return SqlBlockStore(
        lambda: _FakeSession(),
        SlotCatalog(WEEKDAY, WEEKEND),
        today=lambda: TODAY,
        max_retries=max_retries,
    )


def _transient() -> OperationalError:
    return OperationalError("SELECT 1", {}, ConnectionResetError("server closed the connection"))


@patch("availability_engine.stores.sql.asyncio.sleep", new_callable=AsyncMock)
class TestRetry(unittest.TestCase):
    def test_transient_failure_retried(self, sleep) -> None:
        repo = MagicMock()
        repo.upsert = AsyncMock(side_effect=[_transient(), True])
        with patch("availability_engine.stores.sql.SlotBlockRepository", return_value=repo):
            self.assertTrue(_run(_store().add_slot_block(MONDAY, "7:00 PM", "Repairs")))
        self.assertEqual(repo.upsert.await_count, 2)
        sleep.assert_awaited_once_with(0.2)

    def test_exhaustion_raises_store_unavailable(self, sleep) -> None:
        repo = MagicMock()
        repo.dates_in = AsyncMock(side_effect=_transient())
        with patch("availability_engine.stores.sql.FullDayBlockRepository", return_value=repo):
            with self.assertLogs("availability_engine.stores.sql", level="ERROR"):
                with self.assertRaises(StoreUnavailable) as ctx:
                    _run(_store(max_retries=2).full_day_blocks_in(MONDAY, MONDAY))
        self.assertEqual(repo.dates_in.await_count, 3)
        self.assertEqual([c.args[0] for c in sleep.await_args_list], [0.2, 0.4])
        self.assertIsInstance(ctx.exception.cause, OperationalError)
        self.assertEqual(ctx.exception.http_status, 503)

    def test_integrity_error_not_retried(self, sleep) -> None:
        repo = MagicMock()
        repo.delete_by_date = AsyncMock(side_effect=IntegrityError("DELETE", {}, Exception("fk")))
        with patch("availability_engine.stores.sql.FullDayBlockRepository", return_value=repo):
            with self.assertRaises(IntegrityError):
                _run(_store().remove_full_day_block(MONDAY))
        self.assertEqual(repo.delete_by_date.await_count, 1)
        sleep.assert_not_awaited()


class TestSqlBlockStore(unittest.TestCase):
    def test_invalid_label_never_reaches_database(self) -> None:
        with patch("availability_engine.stores.sql.SlotBlockRepository") as repo_cls:
            with self.assertRaises(InvalidSlotLabel):
                _run(_store().add_slot_block(MONDAY, "11:00 AM"))
        repo_cls.assert_not_called()

    def test_full_day_upsert_passes_actor_id(self) -> None:
        repo = MagicMock()
        repo.upsert = AsyncMock(return_value=True)
        actor = AuthenticatedActor(actor_id="staff-7")
        with patch("availability_engine.stores.sql.FullDayBlockRepository", return_value=repo):
            self.assertTrue(_run(_store().add_full_day_block(MONDAY, " Holiday ", actor=actor)))
        repo.upsert.assert_awaited_once_with(MONDAY, "Holiday", "staff-7")

    def test_remove_slot_reports_rowcount(self) -> None:
        repo = MagicMock()
        repo.delete_slot = AsyncMock(return_value=0)
        with patch("availability_engine.stores.sql.SlotBlockRepository", return_value=repo):
            self.assertFalse(_run(_store().remove_slot_block(MONDAY, "7:00 PM")))

    def test_recurring_insert_payload(self) -> None:
        repo = MagicMock()
        repo.create_block = AsyncMock()
        with patch("availability_engine.stores.sql.RecurringBlockRepository", return_value=repo):
            block_id = _run(_store().add_recurring_block(1, "6:30 PM", "7:30 PM", _dt.date(2027, 1, 4)))
        payload = repo.create_block.await_args.args[0]
        self.assertEqual(payload["id"], block_id)
        self.assertEqual(payload["effective_from"], TODAY)
        self.assertEqual(payload["day_of_week"], 1)

    def test_list_recurring_maps_to_domain(self) -> None:
        domain = object()
        repo = MagicMock()
        repo.list_all = AsyncMock(return_value=[SimpleNamespace(to_domain=lambda: domain)])
        with patch("availability_engine.stores.sql.RecurringBlockRepository", return_value=repo):
            self.assertEqual(_run(_store().list_recurring_blocks()), [domain])


if __name__ == "__main__":
    unittest.main()
