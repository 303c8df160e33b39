"""REST client for the rehearsal backend's members, availability and rehearsals."""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

import httpx
import pytz

from models.entities import (
    AvailabilityDate,
    AvailabilityEntry,
    EventOccurrence,
    MemberAvailability,
    Person,
)
from services.config import PlannerSettings, load_settings

logger = logging.getLogger(__name__)

LAST_MINUTE_OF_DAY = "23:59"


def member_display_name(first_name: str, last_name: Optional[str]) -> str:
    return f"{first_name} {last_name}" if last_name else first_name


class RehearsalApiClient:
    """Client for the rehearsal backend's native project API."""

    def __init__(
        self,
        base_url: str = None,
        token: str = None,
        timeout: float = None,
        settings: Optional[PlannerSettings] = None,
        transport: Optional[httpx.BaseTransport] = None
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root (defaults to PLANNER_API_BASE_URL)
            token: Bearer access token (defaults to PLANNER_API_TOKEN)
            timeout: Request timeout in seconds (defaults to PLANNER_API_TIMEOUT)
            settings: Preloaded settings; loaded from the environment when omitted
            transport: Custom httpx transport, used by tests
        """
        settings = settings or load_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.token = token or settings.api_token
        self.timeout = timeout or settings.api_timeout
        self.default_timezone = settings.default_timezone
        self._transport = transport

    def _get_headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _get(self, path: str, params: Optional[Dict[str, str]] = None) -> Optional[Dict[str, Any]]:
        """GET a JSON document; None when the request or decoding fails."""
        try:
            with httpx.Client(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport
            ) as client:
                response = client.get(path, params=params, headers=self._get_headers())
                response.raise_for_status()
                return response.json()
        except httpx.HTTPError as e:
            logger.error("HTTP error fetching %s: %s", path, e)
            return None
        except json.JSONDecodeError:
            logger.error("JSON decode error in response for %s", path)
            return None

    def get_members(self, project_id: str) -> List[Person]:
        """Get the members of a project."""
        result = self._get(f"/native/projects/{project_id}/members")
        if not result:
            return []

        members = []
        for member in result.get("members", []):
            user_id = member.get("userId")
            if user_id is None:
                continue
            members.append(Person(
                id=str(user_id),
                display_name=member_display_name(member.get("firstName", ""), member.get("lastName"))
            ))
        return members

    def get_members_availability(
        self,
        project_id: str,
        start_date: str,
        end_date: str,
        user_ids: Optional[List[str]] = None
    ) -> List[MemberAvailability]:
        """
        Get manual availability of project members for a date range.

        Args:
            project_id: Project ID
            start_date: First date, YYYY-MM-DD
            end_date: Last date (inclusive), YYYY-MM-DD
            user_ids: Restrict to these members (defaults to all active members)

        Returns:
            Availability per member with local HH:MM ranges
        """
        params = {"startDate": start_date, "endDate": end_date}
        if user_ids:
            params["userIds"] = ",".join(user_ids)

        result = self._get(f"/native/projects/{project_id}/members/availability", params)
        if not result:
            return []

        availability = []
        for user in result.get("availability", []):
            dates = [
                AvailabilityDate(
                    date=day.get("date", ""),
                    time_ranges=[
                        AvailabilityEntry(
                            start=r.get("start", ""),
                            end=r.get("end", ""),
                            type=r.get("type", "busy")
                        )
                        for r in day.get("timeRanges", [])
                    ]
                )
                for day in user.get("dates", [])
            ]
            availability.append(MemberAvailability(
                user_id=str(user.get("userId", "")),
                first_name=user.get("firstName", ""),
                last_name=user.get("lastName"),
                dates=dates
            ))
        return availability

    def get_rehearsals(self, project_id: str, timezone: Optional[str] = None) -> List[EventOccurrence]:
        """
        Get rehearsals of a project as local occurrences.

        ``startsAt``/``endsAt`` timestamps are converted to local date and time
        in ``timezone``; legacy ``date``/``time``/``endTime`` fields win when
        present.
        """
        result = self._get(f"/native/projects/{project_id}/rehearsals")
        if not result:
            return []

        tz = pytz.timezone(timezone or self.default_timezone)
        occurrences = []
        for rehearsal in result.get("rehearsals", []):
            occurrence = self._to_occurrence(rehearsal, tz)
            if occurrence is not None:
                occurrences.append(occurrence)
        return occurrences

    def _to_occurrence(self, rehearsal: Dict[str, Any], tz) -> Optional[EventOccurrence]:
        rehearsal_id = str(rehearsal.get("id", ""))
        participants = rehearsal.get("participantIds")
        participant_ids = [str(p) for p in participants] if participants is not None else None

        if rehearsal.get("date") and rehearsal.get("time"):
            return EventOccurrence(
                id=rehearsal_id,
                date=rehearsal["date"],
                start_time=rehearsal["time"],
                end_time=rehearsal.get("endTime"),
                participant_ids=participant_ids,
                title=rehearsal.get("scene") or ""
            )

        starts_at = rehearsal.get("startsAt")
        if not starts_at:
            logger.warning("Skipping rehearsal %s without a start", rehearsal_id)
            return None

        try:
            start_local = self._to_local(starts_at, tz)
            ends_at = rehearsal.get("endsAt")
            end_local = self._to_local(ends_at, tz) if ends_at else None
        except ValueError as e:
            logger.warning("Skipping rehearsal %s with bad timestamp: %s", rehearsal_id, e)
            return None

        end_time = None
        if end_local is not None:
            # A rehearsal running past midnight blocks the rest of its first day
            if end_local.date() != start_local.date():
                end_time = LAST_MINUTE_OF_DAY
            else:
                end_time = end_local.strftime("%H:%M")

        return EventOccurrence(
            id=rehearsal_id,
            date=start_local.date().isoformat(),
            start_time=start_local.strftime("%H:%M"),
            end_time=end_time,
            participant_ids=participant_ids,
            title=rehearsal.get("scene") or ""
        )

    @staticmethod
    def _to_local(timestamp: str, tz) -> datetime:
        parsed = datetime.fromisoformat(timestamp.replace("Z", "+00:00"))
        if parsed.tzinfo is None:
            parsed = pytz.UTC.localize(parsed)
        return parsed.astimezone(tz)
