"""Availability engine FastAPI application: entry point.

Start with:
    uvicorn availability_engine.api.main:app --reload --host 0.0.0.0 --port 8000

Blocks live in PostgreSQL (DATABASE_URL). Occupancy comes from the Booking
Store at BOOKING_STORE_URL; without it nothing is treated as booked.
"""
from __future__ import annotations

import logging
import os
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address

from availability_engine.clients.booking import BaseBookingStore, BookingStoreConfig, default_registry
from availability_engine.config import ScheduleConfig, load_postgres_config, load_schedule_config
from availability_engine.core.exceptions import ConfigurationError, ProjectError
from availability_engine.core.logger import configure
from availability_engine.infra.database.engine import (
    build_engine,
    build_session_factory,
    close_engine,
    ensure_database_exists,
    init_db,
)
from availability_engine.scheduling.catalog import SlotCatalog
from availability_engine.services import AdminCommandHandler, AvailabilityResolver
from availability_engine.stores import SqlBlockStore
from availability_engine.stores.base import BaseBlockStore

logger = logging.getLogger(__name__)


def install_engine(
    app: FastAPI,
    block_store: BaseBlockStore,
    booking_store: BaseBookingStore,
    schedule: Optional[ScheduleConfig] = None,
) -> None:
    """Wire catalog, stores, resolver and command handler into app.state."""
    schedule = schedule or ScheduleConfig()
    catalog = block_store.catalog
    app.state.catalog = catalog
    app.state.block_store = block_store
    app.state.booking_store = booking_store
    app.state.resolver = AvailabilityResolver(
        catalog, block_store, booking_store, max_range_days=schedule.max_range_days
    )
    app.state.command_handler = AdminCommandHandler(block_store, today=schedule.today)


async def project_error_handler(request: Request, exc: ProjectError) -> JSONResponse:
    if exc.http_status >= 500:
        logger.error("API: %s %s failed: %s", request.method, request.url.path, exc.to_dict())
    return JSONResponse(status_code=exc.http_status, content={"error": exc.to_public_dict()})


@asynccontextmanager
async def lifespan(app: FastAPI):
    # ── Startup ──────────────────────────────────────────────────
    configure()

    try:
        pg_config = load_postgres_config()
        schedule = load_schedule_config()
        booking_config = BookingStoreConfig.from_env()
    except ValueError as exc:
        raise ConfigurationError(f"Invalid configuration: {exc}", cause=exc) from exc

    await ensure_database_exists(pg_config)
    engine = build_engine(pg_config)
    session_factory = build_session_factory(engine)
    await init_db(pg_config)
    app.state.session_factory = session_factory

    catalog = SlotCatalog.from_config(schedule)
    block_store = SqlBlockStore(
        session_factory, catalog, today=schedule.today, max_retries=schedule.store_max_retries
    )
    booking_store = default_registry.build(booking_config)
    install_engine(app, block_store, booking_store, schedule)
    logger.info(
        "API: engine ready (%r, block store=%s, booking store=%s)",
        catalog, block_store.backend, booking_store.provider,
    )

    yield

    # ── Shutdown ─────────────────────────────────────────────────
    await booking_store.aclose()
    await close_engine()
    logger.info("API: engine disposed")


app = FastAPI(
    title="Availability Engine API",
    version="1.0.0",
    description="Resolves bookable appointment slots and applies staff block/unblock commands.",
    lifespan=lifespan,
)

# Rate limiter: read endpoints use READ_RATE_LIMIT (default 120/minute)
limiter = Limiter(key_func=get_remote_address)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(ProjectError, project_error_handler)

_allowed_origins = os.environ.get(
    "CORS_ORIGINS", "http://localhost:3000,http://127.0.0.1:3000"
).split(",")

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Optional gateway key ─────────────────────────────────────────
# Set ENGINE_API_KEY to require header  X-Api-Key: <value>  on /api/v1/admin/*.
# If unset the check is skipped (dev/open mode).
_ENGINE_API_KEY = os.environ.get("ENGINE_API_KEY", "").strip() or None


@app.middleware("http")
async def api_key_middleware(request: Request, call_next):
    if _ENGINE_API_KEY and request.url.path.startswith("/api/v1/admin"):
        if request.headers.get("X-Api-Key") != _ENGINE_API_KEY:
            return JSONResponse(
                status_code=401,
                content={"error": {"message": "Unauthorized: set X-Api-Key header", "code": "UNAUTHORIZED"}},
            )
    return await call_next(request)


# ── Routers ───────────────────────────────────────────────────────
from availability_engine.api.routers import admin, availability  # noqa: E402

app.include_router(availability.router, prefix="/api/v1")
app.include_router(admin.router, prefix="/api/v1")


@app.get("/health", tags=["health"])
async def health(request: Request):
    store = getattr(request.app.state, "block_store", None)
    return {"status": "ok", "block_store": store.backend if store is not None else None}
