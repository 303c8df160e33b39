"""Reconcile manual availability with scheduled rehearsals."""

import logging
from typing import Iterable, Optional

from models.entities import (
    AvailabilityEntry,
    DailyBusyProfile,
    EventOccurrence,
    MemberAvailability,
    Person,
    TimeRange,
)
from services.busy_merger import merge_busy_ranges
from services.exceptions import InvalidTimeError

logger = logging.getLogger(__name__)

BLOCKING_TYPES = ("busy", "tentative")


def busy_ranges_from_entries(entries: Iterable[AvailabilityEntry]) -> list[TimeRange]:
    """
    Convert manual entries to busy ranges.

    ``available`` entries carry no scheduling constraint and are discarded.
    Malformed entries are logged and skipped.
    """
    ranges = []
    for entry in entries:
        if entry.type not in BLOCKING_TYPES:
            continue
        try:
            ranges.append(TimeRange.from_strings(entry.start, entry.end))
        except InvalidTimeError as e:
            logger.warning("Skipping malformed availability entry %s: %s", entry, e)
    return ranges


def event_busy_range(event: EventOccurrence) -> Optional[TimeRange]:
    """Busy range of a rehearsal; None when it has no end and so never blocks."""
    if not event.end_time:
        return None
    try:
        return TimeRange.from_strings(event.start_time, event.end_time)
    except InvalidTimeError as e:
        logger.warning("Skipping rehearsal %s with malformed time: %s", event.id, e)
        return None


class AvailabilityReconciler:
    """Builds one authoritative busy profile per (person, date)."""

    def reconcile(
        self,
        members: list[Person],
        availability: list[MemberAvailability],
        events: list[EventOccurrence],
        dates: Optional[list[str]] = None
    ) -> list[DailyBusyProfile]:
        """
        Merge manual availability and rehearsal occurrences.

        Args:
            members: People in scope
            availability: Manual availability per person
            events: Rehearsal occurrences; ``participant_ids=None`` means every
                member in scope takes part
            dates: When given, a profile is produced for every member on each
                of these dates (empty when nothing is booked). Otherwise only
                dates touched by either source are produced.

        Returns:
            Profiles ordered by member (input order), then date ascending.
        """
        member_ids = {m.id for m in members}
        wanted_dates = set(dates) if dates is not None else None

        # member id -> date -> busy ranges from rehearsals
        event_ranges: dict[str, dict[str, list[TimeRange]]] = {}
        for event in events:
            if not event.date:
                continue
            if wanted_dates is not None and event.date not in wanted_dates:
                continue

            participants = event.participant_ids if event.participant_ids is not None else member_ids
            busy = event_busy_range(event)
            for member_id in participants:
                if member_id not in member_ids:
                    continue
                date_map = event_ranges.setdefault(member_id, {})
                ranges = date_map.setdefault(event.date, [])
                if busy is not None:
                    ranges.append(busy)

        availability_by_member: dict[str, MemberAvailability] = {}
        for record in availability:
            availability_by_member.setdefault(record.user_id, record)

        profiles = []
        for member in members:
            manual = availability_by_member.get(member.id)
            member_events = event_ranges.get(member.id, {})

            if dates is not None:
                member_dates = sorted(set(dates))
            else:
                manual_dates = {d.date for d in manual.dates} if manual else set()
                member_dates = sorted(manual_dates | set(member_events))

            for date in member_dates:
                manual_entries = []
                if manual:
                    day = manual.for_date(date)
                    if day:
                        manual_entries = day.time_ranges

                ranges = busy_ranges_from_entries(manual_entries)
                ranges.extend(member_events.get(date, []))
                merged = merge_busy_ranges(ranges)

                logger.debug(
                    "Reconciled member %s on %s: %d raw ranges -> %d busy ranges",
                    member.id, date, len(ranges), len(merged)
                )
                profiles.append(DailyBusyProfile(
                    person_id=member.id,
                    date=date,
                    busy_ranges=merged
                ))

        return profiles
