"""Check a proposed rehearsal time against member availability."""

import logging
from typing import Mapping, Sequence

from models.entities import AvailabilityEntry, ConflictInfo, MemberConflict, Person, TimeRange
from services.exceptions import InvalidTimeError
from services.time_utils import ranges_overlap

logger = logging.getLogger(__name__)


def check_scheduling_conflicts(
    members: list[Person],
    member_entries: Mapping[str, Sequence[AvailabilityEntry]],
    start_time: str,
    end_time: str
) -> ConflictInfo:
    """
    Find members whose ``busy`` entries overlap ``start_time``-``end_time``.

    Tentative and available entries never conflict. Touching ranges do not
    conflict.

    Raises:
        InvalidTimeError: if the proposed time itself is malformed.
    """
    proposed = TimeRange.from_strings(start_time, end_time)

    busy_members = []
    for member in members:
        conflicting = []
        for entry in member_entries.get(member.id, []):
            if entry.type != "busy":
                continue
            try:
                entry_range = TimeRange.from_strings(entry.start, entry.end)
            except InvalidTimeError as e:
                logger.warning("Ignoring malformed entry for member %s: %s", member.id, e)
                continue
            if ranges_overlap(proposed, entry_range):
                conflicting.append(entry)

        if conflicting:
            busy_members.append(MemberConflict(person=member, conflicting_ranges=conflicting))

    return ConflictInfo(has_conflicts=bool(busy_members), busy_members=busy_members)
