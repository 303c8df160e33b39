"""Planner settings loaded from the environment and an optional .env file."""

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

from models.entities import WorkdayWindow


@dataclass
class PlannerSettings:
    """Settings shared by the planner and its availability source."""
    workday_start: str = "09:00"
    workday_end: str = "23:00"
    min_slot_minutes: int = 60
    slot_interval_minutes: int = 30
    api_base_url: str = "http://localhost:3000/api"
    api_token: Optional[str] = None
    api_timeout: float = 10.0
    default_timezone: str = "Asia/Jerusalem"

    @property
    def workday_window(self) -> WorkdayWindow:
        return WorkdayWindow.from_strings(self.workday_start, self.workday_end)


def load_settings(env_file: Optional[str] = None) -> PlannerSettings:
    """
    Load settings from environment variables.

    Variables from ``env_file`` (or a ``.env`` in the working directory) are
    loaded first without overriding the ones already set.
    """
    load_dotenv(env_file)

    return PlannerSettings(
        workday_start=os.getenv("PLANNER_WORKDAY_START", "09:00"),
        workday_end=os.getenv("PLANNER_WORKDAY_END", "23:00"),
        min_slot_minutes=int(os.getenv("PLANNER_MIN_SLOT_MINUTES", "60")),
        slot_interval_minutes=int(os.getenv("PLANNER_SLOT_INTERVAL_MINUTES", "30")),
        api_base_url=os.getenv("PLANNER_API_BASE_URL", "http://localhost:3000/api"),
        api_token=os.getenv("PLANNER_API_TOKEN"),
        api_timeout=float(os.getenv("PLANNER_API_TIMEOUT", "10")),
        default_timezone=os.getenv("PLANNER_DEFAULT_TIMEZONE", "Asia/Jerusalem"),
    )
