"""Exceptions raised by the Smart Planner engine."""


class PlannerError(Exception):
    """Base class for planner errors."""


class InvalidTimeError(PlannerError, ValueError):
    """A time of day is not a valid HH:MM string or minute offset."""


class InvalidDateError(PlannerError, ValueError):
    """A date is not a valid YYYY-MM-DD string."""
