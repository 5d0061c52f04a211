"""Pydantic v2 schemas for the availability read API."""
from __future__ import annotations

import datetime as _dt
from typing import Dict, List

from pydantic import BaseModel, Field

from availability_engine.scheduling.catalog import SlotCatalog
from availability_engine.scheduling.types import AvailabilitySnapshot


class SnapshotResponse(BaseModel):
    date: _dt.date
    is_fully_blocked: bool
    blocked_slots: List[str] = Field(default_factory=list)
    available_slots: List[str] = Field(default_factory=list)

    @classmethod
    def from_snapshot(cls, snapshot: AvailabilitySnapshot, catalog: SlotCatalog) -> "SnapshotResponse":
        return cls(
            date=snapshot.date,
            is_fully_blocked=snapshot.is_fully_blocked,
            blocked_slots=list(catalog.order(snapshot.date, snapshot.blocked_slot_labels)),
            available_slots=list(snapshot.available_slot_labels),
        )


class AvailabilityResponse(BaseModel):
    start_date: _dt.date
    end_date: _dt.date
    days: List[SnapshotResponse]


class BlockedTimesResponse(BaseModel):
    blocked_times: Dict[_dt.date, List[str]]


class BlockedDaysResponse(BaseModel):
    blocked_days: List[_dt.date]


class SlotCheckResponse(BaseModel):
    date: _dt.date
    slot: str
    available: bool


class SlotCatalogResponse(BaseModel):
    date: _dt.date
    schedule: str
    slots: List[str]
