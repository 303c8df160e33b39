"""Multi-day slot recommendation facade."""

import logging
from typing import Optional

from models.entities import (
    SLOT_CATEGORIES,
    EventOccurrence,
    FreeSlot,
    MemberAvailability,
    Person,
    PlannerResult,
    SlotCategory,
    WorkdayWindow,
)
from services.availability_reconciler import AvailabilityReconciler
from services.slot_generator import SLOT_INTERVAL_MINUTES, IntervalCache, find_free_slots
from services.time_utils import iter_dates

logger = logging.getLogger(__name__)


def filter_slots_by_category(
    slots: list[FreeSlot],
    categories: Optional[list[SlotCategory]]
) -> list[FreeSlot]:
    """Keep slots whose category is allowed; an empty allow-list keeps everything."""
    if not categories:
        return list(slots)
    allowed = set(categories)
    return [slot for slot in slots if slot.category in allowed]


def count_slots_by_category(slots: list[FreeSlot]) -> dict[SlotCategory, int]:
    counts: dict[SlotCategory, int] = {category: 0 for category in SLOT_CATEGORIES}
    for slot in slots:
        counts[slot.category] += 1
    return counts


def group_slots_by_date(slots: list[FreeSlot]) -> dict[str, list[FreeSlot]]:
    """Group slots by date, keeping the order in which dates first appear."""
    grouped: dict[str, list[FreeSlot]] = {}
    for slot in slots:
        grouped.setdefault(slot.date, []).append(slot)
    return grouped


class SmartPlanner:
    """Finds and categorizes group free time across a date range."""

    def __init__(
        self,
        window: WorkdayWindow = WorkdayWindow(),
        reconciler: Optional[AvailabilityReconciler] = None,
        interval_cache: Optional[IntervalCache] = None,
        slot_interval_minutes: int = SLOT_INTERVAL_MINUTES
    ):
        """Initialize planner."""
        self.window = window
        self.reconciler = reconciler or AvailabilityReconciler()
        self.interval_cache = interval_cache if interval_cache is not None else IntervalCache()
        self.slot_interval_minutes = slot_interval_minutes

    def generate_time_slots(
        self,
        start_date: str,
        end_date: str,
        members: list[Person],
        availability: list[MemberAvailability],
        events: list[EventOccurrence],
        selected_ids: Optional[list[str]] = None
    ) -> list[FreeSlot]:
        """
        Generate categorized slots for every date in ``[start_date, end_date]``.

        Args:
            start_date: First date, YYYY-MM-DD
            end_date: Last date (inclusive), YYYY-MM-DD
            members: Every member of the project
            availability: Manual availability per member
            events: Rehearsal occurrences
            selected_ids: Members to plan for; empty or None means all members

        Returns:
            Slots in chronological order
        """
        if not start_date or not end_date or not members:
            return []

        member_ids = selected_ids or [m.id for m in members]
        selected = set(member_ids)
        in_scope = [m for m in members if m.id in selected]

        slots: list[FreeSlot] = []
        for date in iter_dates(start_date, end_date):
            profiles = self.reconciler.reconcile(in_scope, availability, events, dates=[date])
            slots.extend(find_free_slots(
                date,
                in_scope,
                profiles,
                member_ids,
                self.window,
                self.interval_cache,
                self.slot_interval_minutes
            ))

        logger.debug(
            "Generated %d slots from %s to %s for %d members",
            len(slots), start_date, end_date, len(in_scope)
        )
        return slots

    def plan(
        self,
        start_date: str,
        end_date: str,
        members: list[Person],
        availability: list[MemberAvailability],
        events: list[EventOccurrence],
        selected_ids: Optional[list[str]] = None,
        categories: Optional[list[SlotCategory]] = None
    ) -> PlannerResult:
        """Generate slots and derive the filtered, grouped and counted views."""
        slots = self.generate_time_slots(
            start_date, end_date, members, availability, events, selected_ids
        )
        filtered = filter_slots_by_category(slots, categories)
        return PlannerResult(
            slots=slots,
            filtered_slots=filtered,
            slots_by_date=group_slots_by_date(filtered),
            category_counts=count_slots_by_category(slots)
        )
