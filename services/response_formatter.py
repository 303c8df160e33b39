"""Structured text formatter for planner results."""

from typing import Dict, List, Optional

from models.entities import ConflictInfo, FreeSlot, PlannerResult, RecommendedSlot, SlotCategory
from services.time_utils import parse_date

CATEGORY_ICONS: Dict[SlotCategory, str] = {
    "perfect": "🟢",
    "good": "🟡",
    "ok": "🟠",
    "bad": "🔴",
}

CATEGORY_LABELS: Dict[SlotCategory, str] = {
    "perfect": "Everyone free",
    "good": "1-2 busy",
    "ok": "3-4 busy",
    "bad": "5+ busy",
}


class ResponseFormatter:
    """Formats planner output as markdown for chat and notification surfaces."""

    @staticmethod
    def format_section(title: str, content: List[str], icon: str = "📋") -> str:
        """Format a section with title and content."""
        lines = [f"**{icon} {title}**", ""]
        lines.extend(content)
        return "\n".join(lines)

    @staticmethod
    def format_slot(slot: FreeSlot) -> str:
        """Format one categorized slot with the names of busy members."""
        icon = CATEGORY_ICONS[slot.category]
        text = (
            f"{icon} {slot.start_time}-{slot.end_time} "
            f"({slot.free_members}/{slot.total_members} free, {slot.duration_hours}h)"
        )
        if slot.busy_members:
            names = ", ".join(m.display_name for m in slot.busy_members)
            text += f" · busy: {names}"
        return text

    @staticmethod
    def format_planner_result(result: PlannerResult, show_counts: bool = True) -> str:
        """Format the Smart Planner view grouped by date."""
        if not result.filtered_slots:
            return ResponseFormatter.format_error(
                "No Matching Slots",
                "No time slots match the selected filters.",
                suggestions=[
                    "Widen the date range",
                    "Select fewer members",
                    "Allow more slot categories"
                ]
            )

        lines = []
        if show_counts:
            counts = " · ".join(
                f"{CATEGORY_ICONS[c]} {CATEGORY_LABELS[c]}: {n}"
                for c, n in result.category_counts.items()
            )
            lines.extend([counts, ""])

        for date_str, slots in result.slots_by_date.items():
            day = parse_date(date_str)
            lines.append(f"**{day.strftime('%A, %B %d')}**")
            for slot in slots:
                lines.append(f"• {ResponseFormatter.format_slot(slot)}")
            lines.append("")

        return ResponseFormatter.format_section("Smart Planner", lines, icon="🗓️").rstrip()

    @staticmethod
    def format_recommendations(slots: List[RecommendedSlot], date_str: str) -> str:
        """Format single-day recommendations, best confidence first."""
        if not slots:
            return ResponseFormatter.format_error(
                "No Free Time",
                f"No window of at least an hour is free on {date_str}."
            )

        lines = []
        for i, slot in enumerate(slots, 1):
            marker = "⭐" if slot.confidence == "high" else f"{i}."
            lines.append(f"{marker} {slot.start_time}-{slot.end_time} ({slot.duration}h, {slot.confidence})")
        return ResponseFormatter.format_section(f"Suggested Times for {date_str}", lines, icon="🎯")

    @staticmethod
    def format_conflict_message(conflict_info: ConflictInfo) -> str:
        """One-line message naming busy members; empty when there is no conflict."""
        if not conflict_info.has_conflicts:
            return ""

        names = ", ".join(c.person.display_name.strip() or "Member" for c in conflict_info.busy_members)
        if len(conflict_info.busy_members) == 1:
            return f"{names} is busy at this time"
        return f"{names} are busy at this time"

    @staticmethod
    def format_error(title: str, message: str, suggestions: Optional[List[str]] = None) -> str:
        """Format an error message."""
        lines = [
            f"**❌ {title}**",
            "",
            message
        ]

        if suggestions:
            lines.append("")
            lines.append("**Suggestions:**")
            for suggestion in suggestions:
                lines.append(f"• {suggestion}")

        return "\n".join(lines)
