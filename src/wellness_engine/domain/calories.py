"""Domain models for calorie tracking."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class DailyCalorieTracking:
    """Calorie target and intake for one user on one day."""

    user_id: UUID
    day: date
    target_calories: float
    consumed_calories: float
    is_adjusted: bool = False
    adjustment_reason: str | None = None
    original_target: float | None = None

    @property
    def remaining_calories(self) -> float:
        """Calories left for the day; negative when over budget."""
        return self.target_calories - self.consumed_calories


@dataclass(frozen=True)
class CalorieAdjustment:
    """Result of the adaptive calorie target calculation."""

    daily_target: float
    is_adjusted: bool
    weekly_deviation: float
    on_track: bool
    days_considered: int
    adjustment_reason: str | None = None
    original_target: float | None = None


@dataclass(frozen=True)
class WeeklyCalorieSummary:
    """Totals over the recent tracking window."""

    total_target: float
    total_consumed: float
    weekly_deviation: float
    average_daily_deviation: float
    days_tracked: int
    on_track: bool


@dataclass(frozen=True)
class MetabolicProfile:
    """Body measurements used to derive a base calorie target."""

    user_id: UUID
    age: int
    sex: str
    height_inches: float
    weight_lbs: float
    activity_level: str


@dataclass(frozen=True)
class BaseCalorieTarget:
    """Base daily target with the figures it was derived from."""

    bmr: float
    tdee: float
    daily_target: float
    weekly_target: float


@dataclass(frozen=True)
class GoalCompletionEstimate:
    """Projected time to reach a weight target at the recent intake rate."""

    estimated_days: int
    estimated_date: date
    weekly_rate_lbs: float
    on_pace: bool


@dataclass(frozen=True)
class MacroTargets:
    """Daily macronutrient targets in grams."""

    protein_g: int
    carbs_g: int
    fat_g: int
