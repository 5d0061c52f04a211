"""Repositories for the block store database."""
from availability_engine.infra.database.repositories.base import BaseRepository
from availability_engine.infra.database.repositories.blocks import (
    FullDayBlockRepository,
    RecurringBlockRepository,
    SlotBlockRepository,
)

__all__ = [
    "BaseRepository",
    "FullDayBlockRepository",
    "SlotBlockRepository",
    "RecurringBlockRepository",
]
