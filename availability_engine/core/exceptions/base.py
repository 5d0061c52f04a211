"""
Base exception types for the engine.

Every error raised to a caller derives from ProjectError and carries a
machine-readable code, a suggested HTTP status and optional details the admin
UI can use to show a corrective message.
"""
from __future__ import annotations

import traceback
from typing import Any, Optional, Type


class ProjectError(Exception):
    """
    Base exception for all engine errors.

    Attributes:
        message: Human-readable error description.
        code: Machine-readable slug (defaults to class default_code).
        http_status: Suggested HTTP status for API responses (default 500).
        details: Extra context (offending date, label, valid labels...).
        cause: Optional chained exception.
    """

    default_code: str = "ERROR"
    default_http_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        code: Optional[str] = None,
        http_status: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code if code is not None else getattr(
            self.__class__, "default_code", self.__class__.__name__
        )
        self.http_status = (
            http_status
            if http_status is not None
            else getattr(self.__class__, "default_http_status", 500)
        )
        self.details: dict[str, Any] = details or {}
        self.cause = cause

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, code={self.code!r}, "
            f"http_status={self.http_status})"
        )

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> dict[str, Any]:
        """Serialize for logging, including the cause traceback."""
        out = self.to_public_dict()
        out["http_status"] = self.http_status
        if self.cause is not None:
            out["cause"] = str(self.cause)
            out["cause_traceback"] = traceback.format_exception(
                type(self.cause), self.cause, self.cause.__traceback__
            )
        return out

    def to_public_dict(self) -> dict[str, Any]:
        """Serialize for API responses (no internals)."""
        out: dict[str, Any] = {"message": self.message, "code": self.code}
        if self.details:
            out["details"] = self.details
        return out


def exception_factory(
    name: str,
    *,
    code: Optional[str] = None,
    http_status: int = 500,
    base: Type[ProjectError] = ProjectError,
) -> Type[ProjectError]:
    """
    Create a new exception class on demand.

    Example:
        SlotConflict = exception_factory("SlotConflict", code="SLOT_CONFLICT", http_status=409)
        raise SlotConflict("Slot already taken", details={"slot_label": "7:00 PM"})
    """
    code = code or name.upper().replace(" ", "_")
    return type(
        name,
        (base,),
        {
            "default_code": code,
            "default_http_status": http_status,
        },
    )
