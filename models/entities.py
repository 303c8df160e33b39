"""Domain models for the Smart Planner availability engine."""

from dataclasses import dataclass, field
from typing import Literal, Optional

SlotCategory = Literal["perfect", "good", "ok", "bad"]
Confidence = Literal["high", "medium"]
AvailabilityType = Literal["available", "busy", "tentative"]

SLOT_CATEGORIES: tuple[SlotCategory, ...] = ("perfect", "good", "ok", "bad")
MINUTES_PER_DAY = 24 * 60


def duration_in_hours(minutes: int) -> float:
    """Hours as an int when whole, otherwise rounded to one decimal."""
    hours = minutes / 60
    if hours.is_integer():
        return int(hours)
    return round(hours, 1)


@dataclass(frozen=True, order=True)
class TimeRange:
    """Interval of minutes since local midnight, start inclusive."""
    start: int
    end: int

    @classmethod
    def from_strings(cls, start: str, end: str) -> "TimeRange":
        from services.time_utils import to_minutes

        return cls(to_minutes(start), to_minutes(end))

    @property
    def is_valid(self) -> bool:
        return 0 <= self.start < self.end < MINUTES_PER_DAY

    @property
    def duration_minutes(self) -> int:
        return self.end - self.start

    def as_strings(self) -> tuple[str, str]:
        from services.time_utils import to_time_string

        return to_time_string(self.start), to_time_string(self.end)


@dataclass
class Person:
    """A project member. Identity is the id; display_name is presentational."""
    id: str
    display_name: str


@dataclass
class AvailabilityEntry:
    """A manually declared availability record in local HH:MM form."""
    start: str
    end: str
    type: AvailabilityType = "busy"


@dataclass
class AvailabilityDate:
    """All manual entries of one person for one local date."""
    date: str  # YYYY-MM-DD
    time_ranges: list[AvailabilityEntry] = field(default_factory=list)


@dataclass
class MemberAvailability:
    """Manual availability of one person as returned by an availability source."""
    user_id: str
    first_name: str = ""
    last_name: Optional[str] = None
    dates: list[AvailabilityDate] = field(default_factory=list)

    def for_date(self, date: str) -> Optional[AvailabilityDate]:
        for entry in self.dates:
            if entry.date == date:
                return entry
        return None


@dataclass
class EventOccurrence:
    """A scheduled rehearsal on one local date."""
    id: str
    date: str  # YYYY-MM-DD
    start_time: str  # HH:MM
    end_time: Optional[str] = None  # missing end means zero duration
    participant_ids: Optional[list[str]] = None  # None: everyone in scope
    title: str = ""


@dataclass
class DailyBusyProfile:
    """Authoritative busy time of one person on one date."""
    person_id: str
    date: str
    busy_ranges: list[TimeRange] = field(default_factory=list)


@dataclass(frozen=True)
class WorkdayWindow:
    """Daily bounds outside of which no slot is recommended."""
    start: int = 9 * 60
    end: int = 23 * 60

    def __post_init__(self):
        if not 0 <= self.start < self.end < MINUTES_PER_DAY:
            raise ValueError(f"Workday window must satisfy 0 <= start < end < 1440, got {self.start}-{self.end}")

    @classmethod
    def from_strings(cls, start: str = "09:00", end: str = "23:00") -> "WorkdayWindow":
        from services.time_utils import to_minutes

        return cls(to_minutes(start), to_minutes(end))

    def as_range(self) -> TimeRange:
        return TimeRange(self.start, self.end)


@dataclass
class BusyMember:
    """A selected person who is unavailable during a slot."""
    person_id: str
    display_name: str
    busy_ranges: list[TimeRange] = field(default_factory=list)


@dataclass
class FreeSlot:
    """A categorized window of the group sweep."""
    date: str
    start_time: str
    end_time: str
    category: SlotCategory
    total_members: int
    busy_members: list[BusyMember] = field(default_factory=list)

    @property
    def busy_count(self) -> int:
        return len(self.busy_members)

    @property
    def free_members(self) -> int:
        return self.total_members - len(self.busy_members)

    @property
    def duration_minutes(self) -> int:
        return TimeRange.from_strings(self.start_time, self.end_time).duration_minutes

    @property
    def duration_hours(self) -> float:
        return duration_in_hours(self.duration_minutes)


@dataclass
class RecommendedSlot:
    """A free window suggested by the single-day ranker."""
    start_time: str
    end_time: str
    duration: float  # hours
    confidence: Confidence


@dataclass
class MemberConflict:
    """A member whose busy entries collide with a proposed time."""
    person: Person
    conflicting_ranges: list[AvailabilityEntry]


@dataclass
class ConflictInfo:
    """Result of checking a proposed rehearsal time against availability."""
    has_conflicts: bool
    busy_members: list[MemberConflict] = field(default_factory=list)


@dataclass
class PlannerResult:
    """Multi-day planner output consumed by the UI layer."""
    slots: list[FreeSlot]
    filtered_slots: list[FreeSlot]
    slots_by_date: dict[str, list[FreeSlot]]
    category_counts: dict[SlotCategory, int]
