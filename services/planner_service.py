"""Loads planner inputs from an availability source and runs the engine."""

import logging
from typing import Optional, Union

from models.entities import PlannerResult, RecommendedSlot, SlotCategory
from services.availability_reconciler import AvailabilityReconciler, busy_ranges_from_entries
from services.availability_source_mock import AvailabilitySourceMock
from services.config import PlannerSettings
from services.rehearsal_api_client import RehearsalApiClient
from services.smart_planner import SmartPlanner
from services.time_recommendations import recommend_times

logger = logging.getLogger(__name__)

AvailabilitySource = Union[RehearsalApiClient, AvailabilitySourceMock]


class PlannerService:
    """Fetches members, availability and rehearsals, then plans."""

    def __init__(
        self,
        source: AvailabilitySource,
        settings: Optional[PlannerSettings] = None,
        planner: Optional[SmartPlanner] = None
    ):
        """Initialize with a data source and optional settings."""
        self.source = source
        self.settings = settings or PlannerSettings()
        self.planner = planner or SmartPlanner(
            window=self.settings.workday_window,
            slot_interval_minutes=self.settings.slot_interval_minutes
        )

    def plan_for_project(
        self,
        project_id: str,
        start_date: str,
        end_date: str,
        selected_ids: Optional[list[str]] = None,
        categories: Optional[list[SlotCategory]] = None,
        timezone: Optional[str] = None
    ) -> PlannerResult:
        """
        Smart Planner view for a project over a date range.

        Args:
            project_id: Project ID
            start_date: First date, YYYY-MM-DD
            end_date: Last date (inclusive), YYYY-MM-DD
            selected_ids: Members to plan for; empty means all members
            categories: Category allow-list; empty means no filter
            timezone: Project timezone used to localize rehearsals

        Returns:
            Planner result with filtered, grouped and counted slots
        """
        members = self.source.get_members(project_id)
        availability = self.source.get_members_availability(project_id, start_date, end_date)
        rehearsals = self.source.get_rehearsals(project_id, timezone or self.settings.default_timezone)

        logger.debug(
            "Loaded project %s: %d members, %d availability records, %d rehearsals",
            project_id, len(members), len(availability), len(rehearsals)
        )

        return self.planner.plan(
            start_date,
            end_date,
            members,
            availability,
            rehearsals,
            selected_ids,
            categories
        )

    def recommend_for_day(
        self,
        project_id: str,
        date: str,
        selected_ids: list[str],
        timezone: Optional[str] = None,
        include_rehearsals: bool = False
    ) -> list[RecommendedSlot]:
        """
        "Suggest a time" for one day and a set of selected members.

        Manual entries are filtered to busy/tentative here before ranking.
        With ``include_rehearsals`` existing rehearsals block time as well.
        """
        if not date or not selected_ids:
            return []

        members = [m for m in self.source.get_members(project_id) if m.id in selected_ids]
        availability = self.source.get_members_availability(project_id, date, date, selected_ids)

        member_ranges = {}
        if include_rehearsals:
            rehearsals = self.source.get_rehearsals(project_id, timezone or self.settings.default_timezone)
            profiles = AvailabilityReconciler().reconcile(members, availability, rehearsals, dates=[date])
            member_ranges = {p.person_id: p.busy_ranges for p in profiles}
        else:
            for record in availability:
                day = record.for_date(date)
                if day:
                    member_ranges[record.user_id] = busy_ranges_from_entries(day.time_ranges)

        return recommend_times(
            date,
            members,
            member_ranges,
            self.planner.window,
            self.settings.min_slot_minutes
        )
