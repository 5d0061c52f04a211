"""Admin router: gateway commands and block listings."""
from __future__ import annotations

import datetime as _dt
import logging
from typing import Any, Dict, List, Optional
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query

from availability_engine.api.dependencies import get_actor, get_block_store, get_command_handler
from availability_engine.api.schemas.admin import (
    CommandResultResponse,
    FullDayBlockResponse,
    RecurringBlockResponse,
    SlotBlockResponse,
    parse_command,
)
from availability_engine.scheduling.commands import RemoveRecurringBlock
from availability_engine.scheduling.types import AuthenticatedActor
from availability_engine.services import AdminCommandHandler
from availability_engine.stores.base import BaseBlockStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin", tags=["admin"])


@router.post("/actions", response_model=CommandResultResponse)
async def run_action(
    payload: Dict[str, Any] = Body(...),
    actor: AuthenticatedActor = Depends(get_actor),
    handler: AdminCommandHandler = Depends(get_command_handler),
):
    """Apply one ``{action, data}`` command forwarded by the admin gateway.

    Batch slot commands answer 200 even when some labels were rejected; check
    ``ok`` and ``slot_results``.
    """
    command = parse_command(payload)
    result = await handler.handle(command, actor)
    return CommandResultResponse.from_result(result)


@router.get("/full-day-blocks", response_model=List[FullDayBlockResponse])
async def list_full_day_blocks(
    start_date: Optional[_dt.date] = Query(default=None, alias="startDate"),
    end_date: Optional[_dt.date] = Query(default=None, alias="endDate"),
    store: BaseBlockStore = Depends(get_block_store),
):
    blocks = await store.list_full_day_blocks(start_date, end_date)
    return [FullDayBlockResponse.from_block(b) for b in blocks]


@router.get("/slot-blocks", response_model=List[SlotBlockResponse])
async def list_slot_blocks(
    start_date: Optional[_dt.date] = Query(default=None, alias="startDate"),
    end_date: Optional[_dt.date] = Query(default=None, alias="endDate"),
    store: BaseBlockStore = Depends(get_block_store),
):
    blocks = await store.list_slot_blocks(start_date, end_date)
    return [SlotBlockResponse.from_block(b) for b in blocks]


@router.get("/recurring-blocks", response_model=List[RecurringBlockResponse])
async def list_recurring_blocks(store: BaseBlockStore = Depends(get_block_store)):
    blocks = await store.list_recurring_blocks()
    return [RecurringBlockResponse.from_block(b) for b in blocks]


@router.get("/recurring-blocks/{block_id}", response_model=RecurringBlockResponse)
async def get_recurring_block(block_id: UUID, store: BaseBlockStore = Depends(get_block_store)):
    return RecurringBlockResponse.from_block(await store.get_recurring_block(block_id))


@router.delete("/recurring-blocks/{block_id}", response_model=CommandResultResponse)
async def delete_recurring_block(
    block_id: UUID,
    actor: AuthenticatedActor = Depends(get_actor),
    handler: AdminCommandHandler = Depends(get_command_handler),
):
    result = await handler.handle(RemoveRecurringBlock(block_id=block_id), actor)
    return CommandResultResponse.from_result(result)
