"""Core data structures for availability resolution."""
from __future__ import annotations

import datetime as _dt
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterator, Optional, Tuple

from availability_engine.core.exceptions import InvalidRange

RecurringBlockId = uuid.UUID

# Day-of-week numbering used across the engine and the admin gateway.
SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)
DAY_NAMES = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")


def day_of_week(date: _dt.date) -> int:
    """0 = Sunday ... 6 = Saturday."""
    return date.isoweekday() % 7


class ScheduleType(str, Enum):
    WEEKDAY = "weekday"
    WEEKEND = "weekend"


@dataclass(frozen=True)
class SlotDefinition:
    label: str
    ordinal: int


@dataclass(frozen=True)
class AuthenticatedActor:
    """Staff identity forwarded by the Admin Action Gateway (already authenticated)."""

    actor_id: str
    display_name: Optional[str] = None

    def __str__(self) -> str:
        return self.display_name or self.actor_id


@dataclass(frozen=True)
class FullDayBlock:
    date: _dt.date
    reason: Optional[str] = None
    created_by: Optional[str] = None


@dataclass(frozen=True)
class SlotBlock:
    date: _dt.date
    slot_label: str
    reason: Optional[str] = None
    created_by: Optional[str] = None


@dataclass(frozen=True)
class RecurringBlock:
    """Weekly exclusion of the slot range start..end (inclusive) on ``day_of_week``."""

    id: RecurringBlockId
    day_of_week: int
    start_slot_label: str
    end_slot_label: str
    effective_from: _dt.date
    effective_until: _dt.date
    reason: Optional[str] = None
    created_by: Optional[str] = None

    def is_active_on(self, date: _dt.date) -> bool:
        return (
            day_of_week(date) == self.day_of_week
            and self.effective_from <= date <= self.effective_until
        )

    def overlaps(self, start: _dt.date, end: _dt.date) -> bool:
        return self.effective_from <= end and self.effective_until >= start


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar-date range. Iteration steps whole days, never clock hours."""

    start: _dt.date
    end: _dt.date

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise InvalidRange(
                f"End date {self.end.isoformat()} is before start date {self.start.isoformat()}",
                details={"start_date": self.start.isoformat(), "end_date": self.end.isoformat()},
            )

    @classmethod
    def single(cls, date: _dt.date) -> "DateRange":
        return cls(date, date)

    def __len__(self) -> int:
        return (self.end - self.start).days + 1

    def __iter__(self) -> Iterator[_dt.date]:
        for offset in range(len(self)):
            yield self.start + _dt.timedelta(days=offset)

    def __contains__(self, date: object) -> bool:
        return isinstance(date, _dt.date) and self.start <= date <= self.end


@dataclass(frozen=True)
class AvailabilitySnapshot:
    """Derived per-date answer; recomputed on every read."""

    date: _dt.date
    is_fully_blocked: bool
    blocked_slot_labels: FrozenSet[str] = field(default_factory=frozenset)
    available_slot_labels: Tuple[str, ...] = ()

