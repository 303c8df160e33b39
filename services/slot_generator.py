"""Free-gap finding and categorization over a workday window."""

import logging
from typing import Optional

from models.entities import (
    BusyMember,
    DailyBusyProfile,
    FreeSlot,
    Person,
    RecommendedSlot,
    SlotCategory,
    TimeRange,
    WorkdayWindow,
    duration_in_hours,
)
from services.busy_merger import merge_busy_ranges
from services.time_utils import clamp_to_workday, to_time_string

logger = logging.getLogger(__name__)

SLOT_INTERVAL_MINUTES = 30
MIN_SLOT_MINUTES = 60


class IntervalCache:
    """Caller-owned memo of tick lists keyed by window bounds and step."""

    def __init__(self):
        self._intervals: dict[tuple[int, int, int], list[int]] = {}

    def get(self, window: WorkdayWindow, step: int = SLOT_INTERVAL_MINUTES) -> list[int]:
        key = (window.start, window.end, step)
        if key not in self._intervals:
            self._intervals[key] = generate_time_intervals(window, step)
        return self._intervals[key]

    def __len__(self) -> int:
        return len(self._intervals)


def generate_time_intervals(window: WorkdayWindow, step: int = SLOT_INTERVAL_MINUTES) -> list[int]:
    """Ticks from window start up to and including window end."""
    if step <= 0:
        raise ValueError(f"Interval step must be positive, got {step}")
    return list(range(window.start, window.end + 1, step))


def is_time_busy(minute: int, busy_ranges: list[TimeRange]) -> bool:
    """Containment test with inclusive start and inclusive end."""
    return any(r.start <= minute <= r.end for r in busy_ranges)


def categorize_slot(busy_count: int, total_members: int) -> SlotCategory:
    """
    Absolute headcount thresholds: 0 perfect, 1-2 good, 3-4 ok, 5+ bad.

    ``total_members`` does not change the cutoffs.
    """
    if busy_count == 0:
        return "perfect"
    if busy_count <= 2:
        return "good"
    if busy_count <= 4:
        return "ok"
    return "bad"


def find_free_slots(
    date: str,
    members: list[Person],
    profiles: list[DailyBusyProfile],
    selected_ids: list[str],
    window: WorkdayWindow = WorkdayWindow(),
    interval_cache: Optional[IntervalCache] = None,
    step: int = SLOT_INTERVAL_MINUTES
) -> list[FreeSlot]:
    """
    Sweep the workday in ticks and cut it into runs of identical busy sets.

    Each tick except the closing one (the window end) is classified by the
    sorted ids of selected members busy at that tick. Every run ends where
    the next one starts; the final run ends at the window end, so the runs
    cover the window without gaps. A day on which every selected member is
    busy at every tick has no slots at all.
    """
    selected = set(selected_ids)
    relevant = [m for m in members if m.id in selected]
    if not relevant:
        return []

    if interval_cache is not None:
        intervals = interval_cache.get(window, step)
    else:
        intervals = generate_time_intervals(window, step)

    busy_by_member: dict[str, list[TimeRange]] = {}
    for profile in profiles:
        if profile.date == date:
            busy_by_member[profile.person_id] = profile.busy_ranges

    # (start minute, sorted busy ids) per run
    runs: list[tuple[int, tuple[str, ...]]] = []
    for tick in intervals[:-1]:
        busy_ids = tuple(sorted(
            m.id for m in relevant if is_time_busy(tick, busy_by_member.get(m.id, []))
        ))
        if not runs or runs[-1][1] != busy_ids:
            runs.append((tick, busy_ids))

    if all(len(busy_ids) == len(relevant) for _, busy_ids in runs):
        logger.debug("Every selected member is busy all day on %s", date)
        return []

    names = {m.id: m.display_name for m in relevant}
    slots = []
    for i, (run_start, busy_ids) in enumerate(runs):
        run_end = runs[i + 1][0] if i + 1 < len(runs) else window.end
        busy_members = [
            BusyMember(
                person_id=member_id,
                display_name=names[member_id],
                busy_ranges=busy_by_member.get(member_id, [])
            )
            for member_id in busy_ids
        ]
        slots.append(FreeSlot(
            date=date,
            start_time=to_time_string(run_start),
            end_time=to_time_string(run_end),
            category=categorize_slot(len(busy_ids), len(relevant)),
            total_members=len(relevant),
            busy_members=busy_members
        ))

    logger.debug("Generated %d slots for %s (%d members)", len(slots), date, len(relevant))
    return slots


def busy_to_free_gaps(busy_ranges: list[TimeRange], window: WorkdayWindow = WorkdayWindow()) -> list[TimeRange]:
    """Complement of a busy timeline inside the workday window."""
    clipped = []
    for r in merge_busy_ranges(busy_ranges):
        clamped = clamp_to_workday(r, window)
        if clamped is not None:
            clipped.append(clamped)

    gaps = []
    previous_end = window.start
    for r in clipped:
        if r.start > previous_end:
            gaps.append(TimeRange(previous_end, r.start))
        previous_end = max(previous_end, r.end)
    if previous_end < window.end:
        gaps.append(TimeRange(previous_end, window.end))
    return gaps


def rank_free_gaps(
    busy_ranges: list[TimeRange],
    window: WorkdayWindow = WorkdayWindow(),
    min_slot_minutes: int = MIN_SLOT_MINUTES
) -> list[RecommendedSlot]:
    """
    Turn a merged group busy timeline into recommended slots.

    Confidence is ``high`` only when the whole timeline is empty and the gap
    lies inside the workday window.
    """
    merged = merge_busy_ranges(busy_ranges)

    slots = []
    for gap in busy_to_free_gaps(merged, window):
        clamped = clamp_to_workday(gap, window)
        if clamped is None or clamped.duration_minutes < min_slot_minutes:
            continue
        in_working_hours = clamped.start >= window.start and clamped.end <= window.end
        start_time, end_time = clamped.as_strings()
        slots.append(RecommendedSlot(
            start_time=start_time,
            end_time=end_time,
            duration=duration_in_hours(clamped.duration_minutes),
            confidence="high" if not merged and in_working_hours else "medium"
        ))

    slots.sort(key=lambda s: s.start_time)
    return slots
