"""Availability engine: bookable appointment slots from a catalog minus staff blocks and bookings."""
