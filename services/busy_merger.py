"""Merge busy ranges into a sorted, non-overlapping timeline."""

import logging
from typing import Iterable

from models.entities import TimeRange

logger = logging.getLogger(__name__)


def merge_busy_ranges(ranges: Iterable[TimeRange]) -> list[TimeRange]:
    """
    Merge overlapping and touching ranges.

    Invalid ranges (``start >= end`` or outside the day) are dropped so that
    one bad record cannot fail a whole group's computation.

    Returns:
        Ranges sorted by start; no two of them overlap or touch.
    """
    cleaned = []
    for r in ranges:
        if not r.is_valid:
            logger.warning("Dropping invalid busy range %s-%s", r.start, r.end)
            continue
        cleaned.append(r)

    if not cleaned:
        return []

    cleaned.sort(key=lambda r: (r.start, r.end))

    merged = [cleaned[0]]
    for current in cleaned[1:]:
        last = merged[-1]
        if current.start <= last.end:
            merged[-1] = TimeRange(last.start, max(last.end, current.end))
        else:
            merged.append(current)
    return merged


def union_busy_ranges(range_lists: Iterable[Iterable[TimeRange]]) -> list[TimeRange]:
    """Union several people's busy ranges into one group timeline."""
    flattened: list[TimeRange] = []
    for ranges in range_lists:
        flattened.extend(ranges)
    return merge_busy_ranges(flattened)
