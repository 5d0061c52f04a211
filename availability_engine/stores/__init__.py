"""
Block stores: BaseBlockStore (validation), SqlBlockStore (PostgreSQL),
InMemoryBlockStore (dev/tests).
"""
from availability_engine.stores.base import BaseBlockStore
from availability_engine.stores.memory import InMemoryBlockStore
from availability_engine.stores.sql import SqlBlockStore, with_store_retry

__all__ = [
    "BaseBlockStore",
    "InMemoryBlockStore",
    "SqlBlockStore",
    "with_store_retry",
]
