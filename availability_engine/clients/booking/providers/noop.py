"""No-op Booking Store when none is configured: nothing is ever occupied."""
from __future__ import annotations

import datetime as _dt
from typing import Dict, Set

from availability_engine.clients.booking.base import BaseBookingStore
from availability_engine.clients.booking.config import BookingStoreConfig


class NoOpBookingStore(BaseBookingStore):
    @property
    def provider(self) -> str:
        return "noop"

    async def occupied_slots_in(self, start: _dt.date, end: _dt.date) -> Dict[_dt.date, Set[str]]:
        return {}


def noop_builder(config: BookingStoreConfig) -> BaseBookingStore:
    return NoOpBookingStore()
