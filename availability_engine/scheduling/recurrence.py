"""RecurrenceExpander: turn a weekly recurring block into concrete slot exclusions.

This module is the only place that interprets a start..end slot range. Range
validation for new recurring blocks goes through ``validate_range`` so that
creation and expansion can never disagree.
"""
from __future__ import annotations

import datetime as _dt
import logging
from typing import FrozenSet, Tuple

from availability_engine.core.exceptions import InvalidDate, InvalidRange
from availability_engine.scheduling.catalog import SlotCatalog
from availability_engine.scheduling.types import DAY_NAMES, RecurringBlock

logger = logging.getLogger(__name__)


class RecurrenceExpander:
    def __init__(self, catalog: SlotCatalog) -> None:
        self._catalog = catalog

    def validate_range(self, day_of_week: int, start_slot_label: str, end_slot_label: str) -> Tuple[int, int]:
        """Return (start_ordinal, end_ordinal) or raise InvalidRange.

        Labels are looked up in the schedule implied by ``day_of_week``.
        """
        if isinstance(day_of_week, bool) or not isinstance(day_of_week, int) or not 0 <= day_of_week <= 6:
            raise InvalidRange(
                f"day_of_week must be 0 (Sunday) .. 6 (Saturday), got {day_of_week!r}",
                details={"day_of_week": day_of_week},
            )
        kind = self._catalog.schedule_type(day_of_week)
        start = self._catalog.ordinal_of(day_of_week, start_slot_label)
        end = self._catalog.ordinal_of(day_of_week, end_slot_label)
        details = {
            "day_of_week": day_of_week,
            "schedule": kind.value,
            "start_slot_label": start_slot_label,
            "end_slot_label": end_slot_label,
        }
        if start is None or end is None:
            missing = start_slot_label if start is None else end_slot_label
            raise InvalidRange(
                f"'{missing}' is not a {kind.value} slot ({DAY_NAMES[day_of_week]})",
                details={**details, "valid_labels": list(self._catalog.labels_for(day_of_week))},
            )
        if start > end:
            raise InvalidRange(
                f"Start slot '{start_slot_label}' comes after end slot '{end_slot_label}'",
                details=details,
            )
        return start, end

    def expand(self, block: RecurringBlock, date: _dt.date) -> FrozenSet[str]:
        """Every slot label of ``date`` whose ordinal lies within the block's range."""
        if not block.is_active_on(date):
            raise InvalidDate(
                f"Recurring block {block.id} does not apply on {date.isoformat()}",
                details={
                    "date": date.isoformat(),
                    "day_of_week": block.day_of_week,
                    "effective_from": block.effective_from.isoformat(),
                    "effective_until": block.effective_until.isoformat(),
                },
            )
        start = self._catalog.ordinal_of(date, block.start_slot_label)
        end = self._catalog.ordinal_of(date, block.end_slot_label)
        if start is None or end is None:
            # Catalog was reconfigured after the block was stored.
            logger.warning(
                "RecurrenceExpander: block %s references slots missing from the %s catalog (%s..%s)",
                block.id, self._catalog.schedule_type(date).value,
                block.start_slot_label, block.end_slot_label,
            )
            return frozenset()
        return frozenset(
            s.label for s in self._catalog.slots_for(date) if start <= s.ordinal <= end
        )
