from availability_engine.clients.booking.providers.http import HttpBookingStore
from availability_engine.clients.booking.providers.noop import NoOpBookingStore

__all__ = ["HttpBookingStore", "NoOpBookingStore"]
