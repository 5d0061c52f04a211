"""SlotCatalog: the single source of truth for which slots can exist on a date.

Weekday vs. weekend is decided here and nowhere else. Every other component
asks the catalog for a date's schedule instead of checking for Saturday/Sunday
itself.
"""
from __future__ import annotations

import datetime as _dt
from typing import TYPE_CHECKING, Dict, Iterable, Optional, Tuple, Union

from availability_engine.core.exceptions import InvalidSlotLabel
from availability_engine.scheduling.types import (
    SATURDAY,
    SUNDAY,
    ScheduleType,
    SlotDefinition,
    day_of_week,
)

if TYPE_CHECKING:
    from availability_engine.config import ScheduleConfig

DateOrDay = Union[_dt.date, int]


class SlotCatalog:
    """Ordered, immutable slot lists for the weekday and weekend schedules."""

    def __init__(self, weekday_labels: Iterable[str], weekend_labels: Iterable[str]) -> None:
        self._slots: Dict[ScheduleType, Tuple[SlotDefinition, ...]] = {
            ScheduleType.WEEKDAY: _build(weekday_labels),
            ScheduleType.WEEKEND: _build(weekend_labels),
        }
        self._ordinals: Dict[ScheduleType, Dict[str, int]] = {
            kind: {s.label: s.ordinal for s in slots} for kind, slots in self._slots.items()
        }

    @classmethod
    def from_config(cls, config: Optional["ScheduleConfig"] = None) -> "SlotCatalog":
        if config is None:
            from availability_engine.config import load_schedule_config
            config = load_schedule_config()
        return cls(config.weekday_slots, config.weekend_slots)

    @staticmethod
    def is_weekend(dow: int) -> bool:
        return dow in (SATURDAY, SUNDAY)

    def schedule_type(self, when: DateOrDay) -> ScheduleType:
        dow = day_of_week(when) if isinstance(when, _dt.date) else when
        if not 0 <= dow <= 6:
            raise ValueError(f"day_of_week must be 0..6, got {dow!r}")
        return ScheduleType.WEEKEND if self.is_weekend(dow) else ScheduleType.WEEKDAY

    def slots_for(self, when: DateOrDay) -> Tuple[SlotDefinition, ...]:
        """Ordered slots for a date (or a day-of-week number)."""
        return self._slots[self.schedule_type(when)]

    def slots_for_day_of_week(self, dow: int) -> Tuple[SlotDefinition, ...]:
        return self.slots_for(dow)

    def labels_for(self, when: DateOrDay) -> Tuple[str, ...]:
        return tuple(s.label for s in self.slots_for(when))

    def contains(self, when: DateOrDay, label: str) -> bool:
        return label in self._ordinals[self.schedule_type(when)]

    def ordinal_of(self, when: DateOrDay, label: str) -> Optional[int]:
        """Ordinal of ``label`` in the schedule for ``when``; None when unknown."""
        return self._ordinals[self.schedule_type(when)].get(label)

    def require_label(self, date: _dt.date, label: str) -> SlotDefinition:
        """Return the slot for ``label`` on ``date`` or raise InvalidSlotLabel."""
        ordinal = self.ordinal_of(date, label)
        if ordinal is None:
            kind = self.schedule_type(date)
            raise InvalidSlotLabel(
                f"'{label}' is not a {kind.value} slot on {date.isoformat()}",
                details={
                    "date": date.isoformat(),
                    "slot_label": label,
                    "schedule": kind.value,
                    "valid_labels": list(self.labels_for(date)),
                },
            )
        return SlotDefinition(label=label, ordinal=ordinal)

    def order(self, when: DateOrDay, labels: Iterable[str]) -> Tuple[str, ...]:
        """Catalog-ordered subset of ``labels``; unknown labels are dropped."""
        wanted = set(labels)
        return tuple(s.label for s in self.slots_for(when) if s.label in wanted)

    def __repr__(self) -> str:
        return (
            f"SlotCatalog(weekday={len(self._slots[ScheduleType.WEEKDAY])} slots, "
            f"weekend={len(self._slots[ScheduleType.WEEKEND])} slots)"
        )


def _build(labels: Iterable[str]) -> Tuple[SlotDefinition, ...]:
    slots = tuple(SlotDefinition(label=label, ordinal=i) for i, label in enumerate(labels))
    if not slots:
        raise ValueError("a schedule needs at least one slot")
    if len({s.label for s in slots}) != len(slots):
        raise ValueError("slot labels must be unique within a schedule")
    return slots
