"""Domain models for scheduled calendar events."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

BALANCE_IMPACTS = ("rest", "moderate", "active", "none")


@dataclass(frozen=True)
class CalendarEvent:
    """Scheduled event with its activity impact."""

    id: UUID
    user_id: UUID
    title: str
    event_date: date
    balance_impact_type: str
    affects_weekly_balance: bool = True
    event_type: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class WeeklyBalance:
    """Rest, moderate and active day counts for a week."""

    week_start: date
    rest_days: int
    moderate_days: int
    active_days: int
    is_balanced: bool
    recommendation: str

    @property
    def planned_days(self) -> int:
        """Days with any classified plan."""
        return self.rest_days + self.moderate_days + self.active_days

    @property
    def balance_score(self) -> float:
        """Share of the week with a classified plan, as a percentage."""
        return min(100.0, self.planned_days / 7 * 100)
