"""HTTP Booking Store provider: one range request per resolution."""
from __future__ import annotations

import datetime as _dt
import logging
from collections import defaultdict
from typing import Any, Dict, Optional, Set

import httpx

from availability_engine.clients.booking.base import BaseBookingStore
from availability_engine.clients.booking.config import BookingStoreConfig
from availability_engine.core.exceptions import BookingStoreError

logger = logging.getLogger(__name__)


class HttpBookingStore(BaseBookingStore):
    """
    Calls ``GET {base_url}/occupied-slots?startDate=YYYY-MM-DD&endDate=YYYY-MM-DD``
    and expects ``{"occupiedSlots": {"YYYY-MM-DD": ["7:00 PM", ...]}}``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 5.0,
        api_key: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if api_key:
            headers["X-Api-Key"] = api_key
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            headers=headers,
            transport=transport,
        )

    @property
    def provider(self) -> str:
        return "http"

    async def occupied_slots_in(self, start: _dt.date, end: _dt.date) -> Dict[_dt.date, Set[str]]:
        params = {"startDate": start.isoformat(), "endDate": end.isoformat()}
        try:
            response = await self._client.get("/occupied-slots", params=params)
            response.raise_for_status()
            payload: Any = response.json()
        except httpx.HTTPError as exc:
            logger.warning("Booking Store request failed (%s..%s): %s", start, end, exc)
            raise BookingStoreError(
                "Booking Store is unavailable; occupancy unknown",
                details=params,
                cause=exc,
            ) from exc
        except ValueError as exc:
            raise BookingStoreError("Booking Store returned invalid JSON", details=params, cause=exc) from exc
        return _parse_occupied(payload, params)

    async def aclose(self) -> None:
        await self._client.aclose()


def _parse_occupied(payload: Any, params: Dict[str, str]) -> Dict[_dt.date, Set[str]]:
    raw = payload.get("occupiedSlots") if isinstance(payload, dict) else None
    if not isinstance(raw, dict):
        raise BookingStoreError("Booking Store response lacks 'occupiedSlots'", details=params)
    occupied: Dict[_dt.date, Set[str]] = defaultdict(set)
    for date_str, labels in raw.items():
        try:
            date = _dt.date.fromisoformat(date_str)
        except (TypeError, ValueError):
            raise BookingStoreError(
                f"Booking Store returned an invalid date {date_str!r}", details=params
            ) from None
        if not isinstance(labels, list):
            raise BookingStoreError(f"Occupied slots for {date_str} must be a list", details=params)
        occupied[date].update(str(label) for label in labels)
    return dict(occupied)


def http_builder(config: BookingStoreConfig) -> BaseBookingStore:
    if not config.base_url:
        raise ValueError("http booking provider requires BOOKING_STORE_URL")
    return HttpBookingStore(config.base_url, timeout=config.timeout, api_key=config.api_key)
