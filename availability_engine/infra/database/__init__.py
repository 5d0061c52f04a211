"""
availability_engine.infra.database – PostgreSQL async engine, models and repositories.

Public API
──────────
  build_engine, build_session_factory, ensure_database_exists, init_db, close_engine
  Base, FullDayBlockRecord, SlotBlockRecord, RecurringBlockRecord (models)
  FullDayBlockRepository, SlotBlockRepository, RecurringBlockRepository
"""
from availability_engine.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    ensure_database_exists,
    init_db,
)
from availability_engine.infra.database.models import (
    Base,
    FullDayBlockRecord,
    RecurringBlockRecord,
    SlotBlockRecord,
)
from availability_engine.infra.database.repositories import (
    BaseRepository,
    FullDayBlockRepository,
    RecurringBlockRepository,
    SlotBlockRepository,
)

__all__ = [
    "build_engine",
    "build_session_factory",
    "ensure_database_exists",
    "init_db",
    "close_engine",
    "Base",
    "FullDayBlockRecord",
    "SlotBlockRecord",
    "RecurringBlockRecord",
    "BaseRepository",
    "FullDayBlockRepository",
    "SlotBlockRepository",
    "RecurringBlockRepository",
]
