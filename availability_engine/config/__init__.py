"""
Engine config: load from env.

load_postgres_config(), load_schedule_config(); the Booking Store client has its
own BookingStoreConfig in availability_engine.clients.booking.
"""
from availability_engine.config.postgres import PostgresConfig, load_postgres_config
from availability_engine.config.schedule import (
    ScheduleConfig,
    format_slot_label,
    generate_slot_labels,
    load_schedule_config,
)

__all__ = [
    "PostgresConfig",
    "load_postgres_config",
    "ScheduleConfig",
    "load_schedule_config",
    "format_slot_label",
    "generate_slot_labels",
]
