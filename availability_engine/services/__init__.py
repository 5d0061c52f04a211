"""Service layer: availability resolution and admin command handling."""
from availability_engine.services.admin_command_service import AdminCommandHandler
from availability_engine.services.availability_service import AvailabilityResolver

__all__ = [
    "AvailabilityResolver",
    "AdminCommandHandler",
]
