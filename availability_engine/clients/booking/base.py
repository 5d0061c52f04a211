from __future__ import annotations

import datetime as _dt
from abc import ABC, abstractmethod
from typing import Dict, Set


class BaseBookingStore(ABC):
    """Read-only view of confirmed, non-cancelled bookings.

    The engine never marks slots occupied itself; it only merges what the
    Booking Store reports.
    """

    @property
    @abstractmethod
    def provider(self) -> str:
        ...

    @abstractmethod
    async def occupied_slots_in(self, start: _dt.date, end: _dt.date) -> Dict[_dt.date, Set[str]]:
        """Occupied slot labels per date for start..end; dates without bookings may be absent."""

    async def occupied_slots(self, date: _dt.date) -> Set[str]:
        occupied = await self.occupied_slots_in(date, date)
        return set(occupied.get(date, set()))

    async def aclose(self) -> None:
        """Release network resources. Default: nothing to release."""
