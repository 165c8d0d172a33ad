"""Domain models for weight goals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

GOAL_TYPES = ("cutting", "bulking", "maintaining")
ACTIVITY_LEVELS = ("sedentary", "light", "moderate", "active", "very_active")


@dataclass(frozen=True)
class UserGoal:
    """Weight goal for a user. At most one goal per user is active."""

    id: UUID
    user_id: UUID
    goal_type: str
    weight_unit: str
    is_active: bool
    started_at: datetime
    current_weight: float | None = None
    target_weight: float | None = None
    target_date: datetime | None = None
    weekly_goal: float | None = None
    activity_level: str | None = None
    completed_at: datetime | None = None


@dataclass(frozen=True)
class GoalProgress:
    """Derived progress toward the active goal."""

    start_weight: float
    current_weight: float
    target_weight: float
    total_change: float
    total_goal: float
    percent_complete: float
    on_track: bool
    days_elapsed: int
    days_remaining: int | None
    weeks_elapsed: float
    expected_change: float | None
    unit: str


@dataclass(frozen=True)
class GoalTypeInfo:
    """Display information for a goal type."""

    label: str
    description: str
