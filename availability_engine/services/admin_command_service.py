"""AdminCommandHandler: apply staff block/unblock commands to the block store."""
from __future__ import annotations

import datetime as _dt
import logging
from typing import Callable, Optional

from availability_engine.core.exceptions import InvalidDate, InvalidSlotLabel, ValidationError
from availability_engine.scheduling.commands import (
    ACTION_NAMES,
    AdminCommand,
    BlockFullDay,
    BlockTimeSlot,
    CommandResult,
    RemoveRecurringBlock,
    SetRecurringBlock,
    SlotOutcome,
    UnblockFullDay,
    UnblockTimeSlot,
)
from availability_engine.scheduling.types import AuthenticatedActor
from availability_engine.stores.base import BaseBlockStore

logger = logging.getLogger(__name__)


class AdminCommandHandler:
    def __init__(
        self,
        block_store: BaseBlockStore,
        *,
        today: Optional[Callable[[], _dt.date]] = None,
    ) -> None:
        self._store = block_store
        self._today = today or _dt.date.today

    async def handle(self, command: AdminCommand, actor: AuthenticatedActor) -> CommandResult:
        """Apply one command. Validation errors propagate, except per-label ones in batches."""
        action = ACTION_NAMES[type(command)]
        logger.info("AdminCommandHandler: %s by %s", action, actor)
        match command:
            case BlockFullDay(date=date, reason=reason):
                self._reject_past(date, action)
                created = await self._store.add_full_day_block(date, reason, actor=actor)
                return CommandResult(action=action, changed=created)
            case UnblockFullDay(date=date):
                removed = await self._store.remove_full_day_block(date)
                return CommandResult(action=action, changed=removed)
            case BlockTimeSlot(date=date, slots=slots, reason=reason):
                self._reject_past(date, action)
                return await self._apply_slots(action, date, slots, reason, actor, block=True)
            case UnblockTimeSlot(date=date, slots=slots):
                return await self._apply_slots(action, date, slots, None, actor, block=False)
            case SetRecurringBlock() as cmd:
                self._reject_past(cmd.until_date, action)
                block_id = await self._store.add_recurring_block(
                    cmd.day_of_week,
                    cmd.start_slot,
                    cmd.end_slot,
                    cmd.until_date,
                    cmd.reason,
                    effective_from=cmd.effective_from,
                    actor=actor,
                )
                return CommandResult(action=action, changed=True, recurring_block_id=block_id)
            case RemoveRecurringBlock(block_id=block_id):
                removed = await self._store.remove_recurring_block(block_id)
                return CommandResult(action=action, changed=removed, recurring_block_id=block_id)
            case _:
                raise ValidationError(f"Unsupported admin command {type(command).__name__}")

    def _reject_past(self, date: _dt.date, action: str) -> None:
        today = self._today()
        if date < today:
            raise InvalidDate(
                f"Cannot {action} for {date.isoformat()}: date is in the past",
                details={"date": date.isoformat(), "today": today.isoformat()},
            )

    async def _apply_slots(
        self,
        action: str,
        date: _dt.date,
        slots: tuple,
        reason: Optional[str],
        actor: AuthenticatedActor,
        *,
        block: bool,
    ) -> CommandResult:
        labels = list(dict.fromkeys(slots))
        if not labels:
            raise ValidationError(f"{action} needs at least one slot", details={"date": date.isoformat()})
        result = CommandResult(action=action)
        # Labels commit one by one; a bad label never undoes earlier ones.
        for label in labels:
            try:
                if block:
                    changed = await self._store.add_slot_block(date, label, reason, actor=actor)
                else:
                    changed = await self._store.remove_slot_block(date, label)
            except InvalidSlotLabel as exc:
                result.slot_results.append(SlotOutcome(label, ok=False, error=exc.to_public_dict()))
                continue
            result.slot_results.append(SlotOutcome(label, ok=True, changed=changed))
        result.ok = all(r.ok for r in result.slot_results)
        result.changed = any(r.changed for r in result.slot_results)
        if not result.ok:
            logger.warning(
                "AdminCommandHandler: %s on %s rejected labels %s", action, date.isoformat(), result.failed_labels
            )
        return result
