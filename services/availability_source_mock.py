"""Mock availability source with synthetic members, availability and rehearsals."""

from datetime import date, datetime, timedelta
from typing import Optional

import pytz

from models.entities import (
    AvailabilityDate,
    AvailabilityEntry,
    EventOccurrence,
    MemberAvailability,
    Person,
)
from services.time_utils import iter_dates


class AvailabilitySourceMock:
    """In-memory stand-in for the rehearsal backend."""

    def __init__(self, anchor_date: Optional[date] = None, timezone: str = "Asia/Jerusalem", days: int = 14):
        """
        Initialize with synthetic data.

        Args:
            anchor_date: First generated date (defaults to today in ``timezone``)
            timezone: Project timezone
            days: Number of generated days
        """
        self.timezone = timezone
        self.anchor_date = anchor_date or datetime.now(pytz.timezone(timezone)).date()
        self.days = days
        self._members = self._generate_members()
        self._availability = self._generate_availability()
        self._rehearsals = self._generate_rehearsals()

    def _generate_members(self) -> list[Person]:
        """Generate synthetic cast members."""
        return [
            Person(id="101", display_name="Anna Levi"),
            Person(id="102", display_name="Boris Katz"),
            Person(id="103", display_name="Dana Cohen"),
            Person(id="104", display_name="Eli Mizrahi"),
            Person(id="105", display_name="Maya"),
        ]

    def _generate_availability(self) -> list[MemberAvailability]:
        """Generate manual availability for every member."""
        availability = []
        for index, member in enumerate(self._members):
            first_name, _, last_name = member.display_name.partition(" ")
            dates = []
            for day_offset in range(self.days):
                current = (self.anchor_date + timedelta(days=day_offset)).isoformat()
                ranges = []

                # Day job on weekdays for the first two members
                if index < 2 and (self.anchor_date + timedelta(days=day_offset)).weekday() < 5:
                    ranges.append(AvailabilityEntry(start="09:00", end="17:00", type="busy"))

                # Evening classes every third day
                if (day_offset + index) % 3 == 0:
                    ranges.append(AvailabilityEntry(start="18:00", end="20:30", type="tentative"))

                # Explicitly free afternoons carry no constraint
                if index == 4:
                    ranges.append(AvailabilityEntry(start="14:00", end="23:00", type="available"))

                if ranges:
                    dates.append(AvailabilityDate(date=current, time_ranges=ranges))

            availability.append(MemberAvailability(
                user_id=member.id,
                first_name=first_name,
                last_name=last_name or None,
                dates=dates
            ))
        return availability

    def _generate_rehearsals(self) -> list[EventOccurrence]:
        """Generate a rehearsal every other day."""
        rehearsals = []
        for day_offset in range(0, self.days, 2):
            current = (self.anchor_date + timedelta(days=day_offset)).isoformat()
            rehearsals.append(EventOccurrence(
                id=f"reh_{day_offset:03d}",
                date=current,
                start_time="19:00",
                end_time="21:00",
                title="Full run-through" if day_offset % 4 == 0 else "Scene work"
            ))
        return rehearsals

    def get_members(self, project_id: str) -> list[Person]:
        """List all members."""
        return self._members.copy()

    def get_members_availability(
        self,
        project_id: str,
        start_date: str,
        end_date: str,
        user_ids: Optional[list[str]] = None
    ) -> list[MemberAvailability]:
        """Get manual availability restricted to a date range and members."""
        wanted = set(iter_dates(start_date, end_date))
        result = []
        for record in self._availability:
            if user_ids and record.user_id not in user_ids:
                continue
            result.append(MemberAvailability(
                user_id=record.user_id,
                first_name=record.first_name,
                last_name=record.last_name,
                dates=[d for d in record.dates if d.date in wanted]
            ))
        return result

    def get_rehearsals(self, project_id: str, timezone: Optional[str] = None) -> list[EventOccurrence]:
        """List all rehearsals (already in local time)."""
        return self._rehearsals.copy()
