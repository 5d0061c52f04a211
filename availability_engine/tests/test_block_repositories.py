"""Tests for the Postgres upsert statements built by the block repositories."""
import asyncio
import datetime as _dt
import unittest
from unittest.mock import AsyncMock, MagicMock

from sqlalchemy.dialects import postgresql

from availability_engine.infra.database.repositories import FullDayBlockRepository, SlotBlockRepository

MONDAY = _dt.date(2026, 11, 2)


def _run(coro):
    return asyncio.run(coro)


def _session(inserted: bool = True) -> MagicMock:
    session = MagicMock()
    session.execute = AsyncMock(return_value=MagicMock(scalar_one=MagicMock(return_value=inserted)))
    return session


def _compiled_sql(session: MagicMock) -> str:
    stmt = session.execute.await_args.args[0]
    sql = str(stmt.compile(dialect=postgresql.dialect()))
    return " ".join(sql.replace('"', "").split()).lower()


class TestFullDayUpsert(unittest.TestCase):
    def test_conflict_on_date_keeps_reason_when_absent(self) -> None:
        session = _session()
        self.assertTrue(_run(FullDayBlockRepository(session).upsert(MONDAY, None, "staff-7")))
        sql = _compiled_sql(session)
        self.assertIn("insert into full_day_blocks", sql)
        self.assertIn("on conflict (date) do update", sql)
        self.assertIn("reason = coalesce(excluded.reason, full_day_blocks.reason)", sql)
        self.assertIn("updated_at = now()", sql)
        self.assertIn("returning (xmax = 0)", sql)

    def test_existing_row_reports_not_inserted(self) -> None:
        session = _session(inserted=False)
        self.assertFalse(_run(FullDayBlockRepository(session).upsert(MONDAY, "Holiday", None)))


class TestSlotUpsert(unittest.TestCase):
    def test_conflict_on_date_label_constraint(self) -> None:
        session = _session()
        self.assertTrue(_run(SlotBlockRepository(session).upsert(MONDAY, "7:00 PM", None, "staff-7")))
        sql = _compiled_sql(session)
        self.assertIn("insert into slot_blocks", sql)
        self.assertIn("on conflict on constraint uq_slot_blocks_date_label do update", sql)
        self.assertIn("reason = coalesce(excluded.reason, slot_blocks.reason)", sql)
        self.assertIn("returning (xmax = 0)", sql)


if __name__ == "__main__":
    unittest.main()
