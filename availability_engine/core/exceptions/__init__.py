"""
Engine exception system.

Usage:
    from availability_engine.core.exceptions import InvalidSlotLabel, exception_factory

    # Built-in types
    raise InvalidSlotLabel("Unknown slot '6:45 PM'", details={"slot_label": "6:45 PM"})

    # Add new type on demand
    ImportError_ = exception_factory("BlockImportError", code="BLOCK_IMPORT_ERROR", http_status=422)
    raise ImportError_("Failed to parse block export", cause=original_error)
"""
from availability_engine.core.exceptions.base import ProjectError, exception_factory
from availability_engine.core.exceptions.errors import (
    BookingStoreError,
    ConfigurationError,
    InvalidDate,
    InvalidRange,
    InvalidSlotLabel,
    NotFound,
    StoreUnavailable,
    UnauthorizedError,
    ValidationError,
)

__all__ = [
    "ProjectError",
    "exception_factory",
    "ConfigurationError",
    "ValidationError",
    "UnauthorizedError",
    "NotFound",
    "InvalidSlotLabel",
    "InvalidRange",
    "InvalidDate",
    "StoreUnavailable",
    "BookingStoreError",
]
