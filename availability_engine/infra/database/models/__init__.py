"""
availability_engine.infra.database.models – SQLAlchemy 2.0 ORM models.

Exports Base, mixins, and all model classes.
"""
from availability_engine.infra.database.models.base import Base, TimestampMixin, _uuid_pk
from availability_engine.infra.database.models.blocks import (
    FullDayBlockRecord,
    RecurringBlockRecord,
    SlotBlockRecord,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "_uuid_pk",
    "FullDayBlockRecord",
    "SlotBlockRecord",
    "RecurringBlockRecord",
]
