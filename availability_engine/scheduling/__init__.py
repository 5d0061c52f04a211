"""
availability_engine.scheduling – pure domain layer (no I/O).

  SlotCatalog         weekday/weekend slot lists, label validation
  RecurrenceExpander  recurring block -> concrete slot exclusions
  types               blocks, snapshots, date ranges, actor
  commands            admin command variants and results
"""
from availability_engine.scheduling.catalog import SlotCatalog
from availability_engine.scheduling.recurrence import RecurrenceExpander
from availability_engine.scheduling.types import (
    AuthenticatedActor,
    AvailabilitySnapshot,
    DateRange,
    FullDayBlock,
    RecurringBlock,
    RecurringBlockId,
    ScheduleType,
    SlotBlock,
    SlotDefinition,
    day_of_week,
)

__all__ = [
    "SlotCatalog",
    "RecurrenceExpander",
    "AuthenticatedActor",
    "AvailabilitySnapshot",
    "DateRange",
    "FullDayBlock",
    "RecurringBlock",
    "RecurringBlockId",
    "ScheduleType",
    "SlotBlock",
    "SlotDefinition",
    "day_of_week",
]
