"""
Booking Store clients: base, config, registry.

Build from env: default_registry.build() – HTTP provider when BOOKING_STORE_URL
is set, otherwise the no-op provider.
"""
from availability_engine.clients.booking.base import BaseBookingStore
from availability_engine.clients.booking.config import BookingStoreConfig
from availability_engine.clients.booking.registry import BookingStoreRegistry, default_registry

__all__ = [
    "BaseBookingStore",
    "BookingStoreConfig",
    "BookingStoreRegistry",
    "default_registry",
]
