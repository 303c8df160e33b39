"""Single-day "suggest a time" ranking."""

import logging
from typing import Mapping, Optional, Sequence

from models.entities import Person, RecommendedSlot, TimeRange, WorkdayWindow
from services.busy_merger import union_busy_ranges
from services.slot_generator import MIN_SLOT_MINUTES, rank_free_gaps

logger = logging.getLogger(__name__)


def recommend_times(
    date: Optional[str],
    members: list[Person],
    member_ranges: Mapping[str, Sequence[TimeRange]],
    window: WorkdayWindow = WorkdayWindow(),
    min_slot_minutes: int = MIN_SLOT_MINUTES
) -> list[RecommendedSlot]:
    """
    Rank free windows of one day for the selected members.

    ``member_ranges`` must already hold busy/tentative ranges only; use
    ``busy_ranges_from_entries`` to filter raw entries.
    """
    if not date or not members:
        return []

    union = union_busy_ranges(member_ranges.get(m.id, []) for m in members)
    slots = rank_free_gaps(union, window, min_slot_minutes)
    logger.debug("Recommended %d slots on %s for %d members", len(slots), date, len(members))
    return slots
