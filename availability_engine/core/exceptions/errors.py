"""
Built-in exception types. Add new ones here or via exception_factory().
"""
from __future__ import annotations

from availability_engine.core.exceptions.base import ProjectError


class ConfigurationError(ProjectError):
    """Invalid or missing configuration."""

    default_code = "CONFIGURATION_ERROR"
    default_http_status = 500


class ValidationError(ProjectError):
    """Request or input validation failed."""

    default_code = "VALIDATION_ERROR"
    default_http_status = 400


class UnauthorizedError(ProjectError):
    """Caller identity missing or gateway key rejected."""

    default_code = "UNAUTHORIZED"
    default_http_status = 401


class NotFound(ProjectError):
    """Requested block not found.

    Unblock operations never raise this; absence is a successful no-op there.
    """

    default_code = "NOT_FOUND"
    default_http_status = 404


class InvalidSlotLabel(ProjectError):
    """Slot label is not part of the catalog for that date."""

    default_code = "INVALID_SLOT_LABEL"
    default_http_status = 422


class InvalidRange(ProjectError):
    """Slot range or date range is inverted, unknown or too long."""

    default_code = "INVALID_RANGE"
    default_http_status = 422


class InvalidDate(ProjectError):
    """Block requested for a past date, or date outside a recurring window."""

    default_code = "INVALID_DATE"
    default_http_status = 422


class StoreUnavailable(ProjectError):
    """Block store failed after the bounded retry budget."""

    default_code = "STORE_UNAVAILABLE"
    default_http_status = 503


class BookingStoreError(ProjectError):
    """External Booking Store could not report occupancy."""

    default_code = "BOOKING_STORE_ERROR"
    default_http_status = 502
