"""Admin commands (a closed set of variants) and their results."""
from __future__ import annotations

import datetime as _dt
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

from availability_engine.scheduling.types import RecurringBlockId


@dataclass(frozen=True)
class BlockFullDay:
    date: _dt.date
    reason: Optional[str] = None


@dataclass(frozen=True)
class UnblockFullDay:
    date: _dt.date


@dataclass(frozen=True)
class BlockTimeSlot:
    date: _dt.date
    slots: Tuple[str, ...]
    reason: Optional[str] = None


@dataclass(frozen=True)
class UnblockTimeSlot:
    date: _dt.date
    slots: Tuple[str, ...]


@dataclass(frozen=True)
class SetRecurringBlock:
    day_of_week: int
    start_slot: str
    end_slot: str
    until_date: _dt.date
    reason: Optional[str] = None
    effective_from: Optional[_dt.date] = None


@dataclass(frozen=True)
class RemoveRecurringBlock:
    block_id: RecurringBlockId


AdminCommand = Union[
    BlockFullDay,
    UnblockFullDay,
    BlockTimeSlot,
    UnblockTimeSlot,
    SetRecurringBlock,
    RemoveRecurringBlock,
]

ACTION_NAMES: Dict[type, str] = {
    BlockFullDay: "blockFullDay",
    UnblockFullDay: "unblockFullDay",
    BlockTimeSlot: "blockTimeSlot",
    UnblockTimeSlot: "unblockTimeSlot",
    SetRecurringBlock: "setRecurringBlock",
    RemoveRecurringBlock: "removeRecurringBlock",
}


@dataclass(frozen=True)
class SlotOutcome:
    """Result of applying one label of a batch slot command."""

    slot_label: str
    ok: bool
    changed: bool = False
    error: Optional[Dict[str, Any]] = None


@dataclass
class CommandResult:
    action: str
    ok: bool = True
    changed: bool = False
    slot_results: List[SlotOutcome] = field(default_factory=list)
    recurring_block_id: Optional[RecurringBlockId] = None

    @property
    def failed_labels(self) -> List[str]:
        return [r.slot_label for r in self.slot_results if not r.ok]
