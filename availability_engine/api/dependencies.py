"""FastAPI dependency providers."""
from __future__ import annotations

from typing import Optional

from fastapi import Header, Request

from availability_engine.core.exceptions import ConfigurationError, UnauthorizedError
from availability_engine.scheduling.catalog import SlotCatalog
from availability_engine.scheduling.types import AuthenticatedActor
from availability_engine.services import AdminCommandHandler, AvailabilityResolver
from availability_engine.stores.base import BaseBlockStore


def _state(request: Request, name: str):
    value = getattr(request.app.state, name, None)
    if value is None:
        raise ConfigurationError(f"Engine is not initialised ({name} missing)")
    return value


def get_catalog(request: Request) -> SlotCatalog:
    return _state(request, "catalog")


def get_block_store(request: Request) -> BaseBlockStore:
    return _state(request, "block_store")


def get_resolver(request: Request) -> AvailabilityResolver:
    return _state(request, "resolver")


def get_command_handler(request: Request) -> AdminCommandHandler:
    return _state(request, "command_handler")


def get_actor(
    x_actor_id: Optional[str] = Header(default=None),
    x_actor_name: Optional[str] = Header(default=None),
) -> AuthenticatedActor:
    """Staff identity forwarded by the Admin Action Gateway."""
    actor_id = (x_actor_id or "").strip()
    if not actor_id:
        raise UnauthorizedError("Missing X-Actor-Id header from the admin gateway")
    return AuthenticatedActor(actor_id=actor_id, display_name=(x_actor_name or "").strip() or None)
