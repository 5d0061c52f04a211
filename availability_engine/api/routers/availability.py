"""Availability router: public read endpoints used by the booking page."""

import datetime as _dt
import os

from fastapi import APIRouter, Depends, Query, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from availability_engine.api.dependencies import get_catalog, get_resolver
from availability_engine.api.schemas.availability import (
    AvailabilityResponse,
    BlockedDaysResponse,
    BlockedTimesResponse,
    SlotCatalogResponse,
    SlotCheckResponse,
    SnapshotResponse,
)
from availability_engine.scheduling.catalog import SlotCatalog
from availability_engine.services import AvailabilityResolver

router = APIRouter(tags=["availability"])
limiter = Limiter(key_func=get_remote_address)

READ_RATE_LIMIT = os.environ.get("READ_RATE_LIMIT", "120/minute")


@router.get("/availability", response_model=AvailabilityResponse)
@limiter.limit(READ_RATE_LIMIT)
async def get_availability(
    request: Request,
    start_date: _dt.date = Query(..., alias="startDate"),
    end_date: _dt.date = Query(..., alias="endDate"),
    resolver: AvailabilityResolver = Depends(get_resolver),
    catalog: SlotCatalog = Depends(get_catalog),
):
    snapshots = await resolver.resolve(start_date, end_date)
    return AvailabilityResponse(
        start_date=start_date,
        end_date=end_date,
        days=[SnapshotResponse.from_snapshot(s, catalog) for s in snapshots],
    )


@router.get("/availability/blocked-times", response_model=BlockedTimesResponse)
@limiter.limit(READ_RATE_LIMIT)
async def get_blocked_times(
    request: Request,
    start_date: _dt.date = Query(..., alias="startDate"),
    end_date: _dt.date = Query(..., alias="endDate"),
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    return BlockedTimesResponse(blocked_times=await resolver.blocked_times(start_date, end_date))


@router.get("/availability/blocked-days", response_model=BlockedDaysResponse)
@limiter.limit(READ_RATE_LIMIT)
async def get_blocked_days(
    request: Request,
    start_date: _dt.date = Query(..., alias="startDate"),
    end_date: _dt.date = Query(..., alias="endDate"),
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    return BlockedDaysResponse(blocked_days=await resolver.blocked_days(start_date, end_date))


@router.get("/availability/check", response_model=SlotCheckResponse)
@limiter.limit(READ_RATE_LIMIT)
async def check_slot(
    request: Request,
    date: _dt.date = Query(...),
    slot: str = Query(..., min_length=1),
    resolver: AvailabilityResolver = Depends(get_resolver),
):
    available = await resolver.is_slot_available(date, slot)
    return SlotCheckResponse(date=date, slot=slot, available=available)


@router.get("/slots", response_model=SlotCatalogResponse)
@limiter.limit(READ_RATE_LIMIT)
async def get_slots(
    request: Request,
    date: _dt.date = Query(...),
    catalog: SlotCatalog = Depends(get_catalog),
):
    """Every slot the schedule offers on ``date``, ignoring blocks."""
    return SlotCatalogResponse(
        date=date,
        schedule=catalog.schedule_type(date).value,
        slots=list(catalog.labels_for(date)),
    )
