"""Pydantic v2 schemas for admin gateway commands and block listings.

Gateway payloads are ``{"action": ..., "data": {...}}``; ``action`` selects the
command model, so each variant validates its own required fields.
"""
from __future__ import annotations

import datetime as _dt
from typing import Annotated, Any, Dict, List, Literal, Optional, Union
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from availability_engine.core.exceptions import ValidationError
from availability_engine.scheduling.commands import (
    AdminCommand,
    BlockFullDay,
    BlockTimeSlot,
    CommandResult,
    RemoveRecurringBlock,
    SetRecurringBlock,
    UnblockFullDay,
    UnblockTimeSlot,
)
from availability_engine.scheduling.types import FullDayBlock, RecurringBlock, SlotBlock

_camel = ConfigDict(populate_by_name=True, extra="forbid")


# ── Command data ─────────────────────────────────────────────────


class DayData(BaseModel):
    model_config = _camel

    date: _dt.date


class DayBlockData(DayData):
    reason: Optional[str] = Field(default=None, max_length=500)


class SlotsData(BaseModel):
    model_config = _camel

    date: _dt.date
    slots: List[str] = Field(..., min_length=1)


class SlotsBlockData(SlotsData):
    reason: Optional[str] = Field(default=None, max_length=500)


class RecurringBlockData(BaseModel):
    model_config = _camel

    day_of_week: int = Field(..., alias="dayOfWeek", ge=0, le=6)
    start_slot: str = Field(..., alias="startSlot", min_length=1)
    end_slot: str = Field(..., alias="endSlot", min_length=1)
    until_date: _dt.date = Field(..., alias="untilDate")
    effective_from: Optional[_dt.date] = Field(default=None, alias="effectiveFrom")
    reason: Optional[str] = Field(default=None, max_length=500)


class RecurringBlockRef(BaseModel):
    model_config = _camel

    block_id: UUID = Field(..., alias="blockId")


# ── Commands ─────────────────────────────────────────────────────


class BlockFullDayRequest(BaseModel):
    action: Literal["blockFullDay"]
    data: DayBlockData

    def to_command(self) -> AdminCommand:
        return BlockFullDay(date=self.data.date, reason=self.data.reason)


class UnblockFullDayRequest(BaseModel):
    action: Literal["unblockFullDay"]
    data: DayData

    def to_command(self) -> AdminCommand:
        return UnblockFullDay(date=self.data.date)


class BlockTimeSlotRequest(BaseModel):
    action: Literal["blockTimeSlot"]
    data: SlotsBlockData

    def to_command(self) -> AdminCommand:
        return BlockTimeSlot(date=self.data.date, slots=tuple(self.data.slots), reason=self.data.reason)


class UnblockTimeSlotRequest(BaseModel):
    action: Literal["unblockTimeSlot"]
    data: SlotsData

    def to_command(self) -> AdminCommand:
        return UnblockTimeSlot(date=self.data.date, slots=tuple(self.data.slots))


class SetRecurringBlockRequest(BaseModel):
    action: Literal["setRecurringBlock"]
    data: RecurringBlockData

    def to_command(self) -> AdminCommand:
        d = self.data
        return SetRecurringBlock(
            day_of_week=d.day_of_week,
            start_slot=d.start_slot,
            end_slot=d.end_slot,
            until_date=d.until_date,
            reason=d.reason,
            effective_from=d.effective_from,
        )


class RemoveRecurringBlockRequest(BaseModel):
    action: Literal["removeRecurringBlock"]
    data: RecurringBlockRef

    def to_command(self) -> AdminCommand:
        return RemoveRecurringBlock(block_id=self.data.block_id)


AdminActionRequest = Annotated[
    Union[
        BlockFullDayRequest,
        UnblockFullDayRequest,
        BlockTimeSlotRequest,
        UnblockTimeSlotRequest,
        SetRecurringBlockRequest,
        RemoveRecurringBlockRequest,
    ],
    Field(discriminator="action"),
]

_action_adapter: TypeAdapter[Any] = TypeAdapter(AdminActionRequest)


def parse_command(payload: Any) -> AdminCommand:
    """Validate a raw gateway payload into a command. Raises ValidationError (400)."""
    try:
        request = _action_adapter.validate_python(payload)
    except PydanticValidationError as exc:
        raise ValidationError(
            "Malformed admin action payload",
            details={
                "errors": [
                    {"loc": [str(p) for p in err["loc"]], "msg": err["msg"], "type": err["type"]}
                    for err in exc.errors()
                ]
            },
        ) from exc
    return request.to_command()


# ── Responses ────────────────────────────────────────────────────


class SlotOutcomeResponse(BaseModel):
    slot: str
    ok: bool
    changed: bool = False
    error: Optional[Dict[str, Any]] = None


class CommandResultResponse(BaseModel):
    action: str
    ok: bool
    changed: bool
    slot_results: List[SlotOutcomeResponse] = Field(default_factory=list)
    recurring_block_id: Optional[UUID] = None

    @classmethod
    def from_result(cls, result: CommandResult) -> "CommandResultResponse":
        return cls(
            action=result.action,
            ok=result.ok,
            changed=result.changed,
            slot_results=[
                SlotOutcomeResponse(slot=r.slot_label, ok=r.ok, changed=r.changed, error=r.error)
                for r in result.slot_results
            ],
            recurring_block_id=result.recurring_block_id,
        )


class FullDayBlockResponse(BaseModel):
    date: _dt.date
    reason: Optional[str] = None
    created_by: Optional[str] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_block(cls, block: FullDayBlock) -> "FullDayBlockResponse":
        return cls.model_validate(block)


class SlotBlockResponse(BaseModel):
    date: _dt.date
    slot_label: str
    reason: Optional[str] = None
    created_by: Optional[str] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_block(cls, block: SlotBlock) -> "SlotBlockResponse":
        return cls.model_validate(block)


class RecurringBlockResponse(BaseModel):
    id: UUID
    day_of_week: int
    start_slot_label: str
    end_slot_label: str
    effective_from: _dt.date
    effective_until: _dt.date
    reason: Optional[str] = None
    created_by: Optional[str] = None

    model_config = {"from_attributes": True}

    @classmethod
    def from_block(cls, block: RecurringBlock) -> "RecurringBlockResponse":
        return cls.model_validate(block)
