"""Minute-granularity time primitives and range helpers."""

import re
from datetime import date, timedelta
from typing import Iterator, Literal, Optional

from models.entities import MINUTES_PER_DAY, TimeRange, WorkdayWindow
from services.exceptions import InvalidDateError, InvalidTimeError

DayClass = Literal["free", "partial", "busy"]

# Latest minute the availability editor can express for a day.
DAY_END = 23 * 60 + 59

# ASCII digits only; one or two hour digits, exactly two minute digits.
TIME_PATTERN = re.compile(r"([0-9]{1,2}):([0-9]{2})")


def to_minutes(time_str: str) -> int:
    """
    Convert an ``HH:MM`` string to minutes since midnight.

    Raises:
        InvalidTimeError: if the string is malformed or out of range. Values
            are never clamped, so upstream data bugs stay visible.
    """
    match = TIME_PATTERN.fullmatch(time_str) if isinstance(time_str, str) else None
    if match is None:
        raise InvalidTimeError(f"Expected HH:MM, got {time_str!r}")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    if hours >= 24 or minutes >= 60:
        raise InvalidTimeError(f"Time out of range: {time_str!r}")
    return hours * 60 + minutes


def to_time_string(minutes: int) -> str:
    """Convert minutes since midnight to a zero-padded ``HH:MM`` string."""
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise InvalidTimeError(f"Minutes out of range for a single day: {minutes}")
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def ranges_overlap(a: TimeRange, b: TimeRange) -> bool:
    """Strict overlap; ranges that only touch do not overlap."""
    return a.start < b.end and b.start < a.end


def ranges_touch_or_overlap(a: TimeRange, b: TimeRange) -> bool:
    """True when two ranges should be merged into one."""
    return a.start <= b.end and b.start <= a.end


def clamp_to_workday(time_range: TimeRange, window: WorkdayWindow) -> Optional[TimeRange]:
    """Clip a range to the workday window, or None when nothing is left."""
    start = max(time_range.start, window.start)
    end = min(time_range.end, window.end)
    if start < end:
        return TimeRange(start, end)
    return None


def subtract_range(ranges: list[TimeRange], to_subtract: Optional[TimeRange]) -> list[TimeRange]:
    """Remove ``to_subtract`` from every range, splitting where needed."""
    if to_subtract is None:
        return list(ranges)

    result = []
    for r in ranges:
        if to_subtract.end <= r.start or to_subtract.start >= r.end:
            result.append(r)
            continue
        if to_subtract.start > r.start:
            result.append(TimeRange(r.start, min(to_subtract.start, r.end)))
        if to_subtract.end < r.end:
            result.append(TimeRange(max(to_subtract.end, r.start), r.end))
    return result


def is_day_fully_busy(ranges: list[TimeRange]) -> bool:
    """A merged list consisting of the single range 00:00-23:59."""
    return len(ranges) == 1 and ranges[0].start == 0 and ranges[0].end == DAY_END


def classify_day(ranges: list[TimeRange]) -> DayClass:
    """Classify a merged busy list for calendar day markers."""
    if not ranges:
        return "free"
    if ranges[0].start <= 0 and ranges[-1].end >= DAY_END:
        return "busy"
    return "partial"


def parse_date(value: str) -> date:
    """Parse a ``YYYY-MM-DD`` string."""
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError) as e:
        raise InvalidDateError(f"Expected YYYY-MM-DD, got {value!r}") from e


def iter_dates(start_date: str, end_date: str) -> Iterator[str]:
    """Yield every date from start to end, both inclusive, as ``YYYY-MM-DD``."""
    current = parse_date(start_date)
    last = parse_date(end_date)
    while current <= last:
        yield current.isoformat()
        current += timedelta(days=1)
