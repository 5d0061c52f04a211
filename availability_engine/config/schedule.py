"""
availability_engine.config.schedule – slot catalogs and engine limits.

Env vars:
    WEEKDAY_SLOTS / WEEKEND_SLOTS   – explicit comma-separated labels ("6:30 PM,7:00 PM")
    WEEKDAY_START / WEEKDAY_END     – "HH:MM" bounds used when WEEKDAY_SLOTS is unset
    WEEKEND_START / WEEKEND_END     – same for weekends
    SLOT_INTERVAL_MINUTES           – step between generated slots (default 30)
    BUSINESS_TIMEZONE               – zone that defines "today" (default America/New_York)
    MAX_RANGE_DAYS                  – longest resolvable range (default 366)
    STORE_MAX_RETRIES               – retries for transient store failures (default 3)
"""
from __future__ import annotations

import datetime as _dt
import os
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

DEFAULT_WEEKDAY_WINDOW = ("18:30", "22:30")
DEFAULT_WEEKEND_WINDOW = ("11:00", "20:00")
DEFAULT_INTERVAL_MINUTES = 30


def format_slot_label(t: _dt.time) -> str:
    """Render a clock time the way the booking site labels slots: "6:30 PM"."""
    hour12 = t.hour % 12 or 12
    suffix = "AM" if t.hour < 12 else "PM"
    return f"{hour12}:{t.minute:02d} {suffix}"


def _parse_hhmm(value: str, name: str) -> _dt.time:
    try:
        return _dt.datetime.strptime(value.strip(), "%H:%M").time()
    except ValueError:
        raise ValueError(f"{name} must be HH:MM, got {value!r}") from None


def generate_slot_labels(start: str, end: str, interval_minutes: int) -> Tuple[str, ...]:
    """Labels from ``start`` to ``end`` inclusive, every ``interval_minutes``.

    Only used to build the catalog at load time; resolution never does clock math.
    """
    if interval_minutes < 1:
        raise ValueError(f"SLOT_INTERVAL_MINUTES must be >= 1, got {interval_minutes!r}")
    anchor = _dt.date(2000, 1, 1)
    cursor = _dt.datetime.combine(anchor, _parse_hhmm(start, "start"))
    last = _dt.datetime.combine(anchor, _parse_hhmm(end, "end"))
    if last < cursor:
        raise ValueError(f"slot window end {end!r} is before start {start!r}")
    labels = []
    while cursor <= last:
        labels.append(format_slot_label(cursor.time()))
        cursor += _dt.timedelta(minutes=interval_minutes)
    return tuple(labels)


def _validate_labels(labels: Sequence[str], name: str) -> Tuple[str, ...]:
    cleaned = tuple(label.strip() for label in labels)
    if not cleaned or any(not label for label in cleaned):
        raise ValueError(f"{name} must contain at least one non-empty label")
    if len(set(cleaned)) != len(cleaned):
        raise ValueError(f"{name} contains duplicate labels: {cleaned!r}")
    return cleaned


@dataclass(frozen=True)
class ScheduleConfig:
    """Weekday/weekend slot catalogs plus limits the resolver and stores honour."""

    weekday_slots: Tuple[str, ...] = generate_slot_labels(*DEFAULT_WEEKDAY_WINDOW, DEFAULT_INTERVAL_MINUTES)
    weekend_slots: Tuple[str, ...] = generate_slot_labels(*DEFAULT_WEEKEND_WINDOW, DEFAULT_INTERVAL_MINUTES)
    timezone: str = "America/New_York"
    max_range_days: int = 366
    store_max_retries: int = 3

    def __post_init__(self) -> None:
        object.__setattr__(self, "weekday_slots", _validate_labels(self.weekday_slots, "weekday_slots"))
        object.__setattr__(self, "weekend_slots", _validate_labels(self.weekend_slots, "weekend_slots"))
        try:
            ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError):
            raise ValueError(f"BUSINESS_TIMEZONE {self.timezone!r} is not a known IANA zone") from None
        if not isinstance(self.max_range_days, int) or self.max_range_days < 1:
            raise ValueError(f"max_range_days must be a positive integer, got {self.max_range_days!r}")
        if not isinstance(self.store_max_retries, int) or self.store_max_retries < 0:
            raise ValueError(f"store_max_retries must be >= 0, got {self.store_max_retries!r}")

    def today(self, now: Optional[_dt.datetime] = None) -> _dt.date:
        """Current calendar date in the business timezone."""
        tz = ZoneInfo(self.timezone)
        if now is None:
            return _dt.datetime.now(tz).date()
        return now.astimezone(tz).date()

    @classmethod
    def from_env(cls, **overrides: object) -> ScheduleConfig:
        """Build from environment variables; keyword overrides win."""
        interval = int(os.environ.get("SLOT_INTERVAL_MINUTES", DEFAULT_INTERVAL_MINUTES))

        def _slots(kind: str, window: Tuple[str, str]) -> Tuple[str, ...]:
            if overrides.get(f"{kind}_slots") is not None:
                return tuple(overrides[f"{kind}_slots"])  # type: ignore[arg-type]
            explicit = os.environ.get(f"{kind.upper()}_SLOTS", "").strip()
            if explicit:
                return tuple(explicit.split(","))
            start = os.environ.get(f"{kind.upper()}_START", window[0])
            end = os.environ.get(f"{kind.upper()}_END", window[1])
            return generate_slot_labels(start, end, interval)

        return cls(
            weekday_slots=_slots("weekday", DEFAULT_WEEKDAY_WINDOW),
            weekend_slots=_slots("weekend", DEFAULT_WEEKEND_WINDOW),
            timezone=str(overrides.get("timezone") or os.environ.get("BUSINESS_TIMEZONE", "America/New_York")),
            max_range_days=int(overrides.get("max_range_days") or os.environ.get("MAX_RANGE_DAYS", 366)),  # type: ignore[arg-type]
            store_max_retries=int(
                overrides["store_max_retries"] if overrides.get("store_max_retries") is not None
                else os.environ.get("STORE_MAX_RETRIES", 3)  # type: ignore[arg-type]
            ),
        )


def load_schedule_config(**overrides: object) -> ScheduleConfig:
    """Load and validate the schedule config. Raises ValueError on invalid values."""
    return ScheduleConfig.from_env(**overrides)
