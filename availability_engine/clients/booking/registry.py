"""
Booking Store provider registry: map provider name -> build client from BookingStoreConfig.
"""
from __future__ import annotations

from typing import Callable, Dict, Optional

from availability_engine.clients.booking.base import BaseBookingStore
from availability_engine.clients.booking.config import BookingStoreConfig

Builder = Callable[[BookingStoreConfig], BaseBookingStore]


class BookingStoreRegistry:
    def __init__(self) -> None:
        self._builders: Dict[str, Builder] = {}

    def register(self, provider: str, builder: Builder) -> None:
        self._builders[provider] = builder

    def build(self, config: Optional[BookingStoreConfig] = None) -> BaseBookingStore:
        """Build the provider the config selects. Raises KeyError for unknown providers."""
        config = config or BookingStoreConfig.from_env()
        builder = self._builders.get(config.provider)
        if builder is None:
            raise KeyError(
                f"Unknown Booking Store provider: {config.provider!r}. Registered: {list(self._builders)}"
            )
        return builder(config)


default_registry = BookingStoreRegistry()

from availability_engine.clients.booking.providers.http import http_builder  # noqa: E402
from availability_engine.clients.booking.providers.noop import noop_builder  # noqa: E402

default_registry.register("http", http_builder)
default_registry.register("noop", noop_builder)
