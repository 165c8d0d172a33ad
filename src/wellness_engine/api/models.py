"""Pydantic request models for the HTTP API."""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, Field

WeightUnit = Literal["lbs", "kg"]
GoalType = Literal["cutting", "bulking", "maintaining"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very_active"]
BalanceImpact = Literal["rest", "moderate", "active", "none"]


class WeightLogCreate(BaseModel):
    """New weight reading."""

    weight: float = Field(gt=0)
    unit: WeightUnit = "lbs"
    notes: str | None = None
    logged_at: datetime | None = None


class WeightLogUpdate(BaseModel):
    """Correction to a weight reading."""

    weight: float | None = Field(default=None, gt=0)
    unit: WeightUnit | None = None
    notes: str | None = None
    logged_at: datetime | None = None


class GoalCreate(BaseModel):
    """New goal replacing the active one."""

    goal_type: GoalType
    current_weight: float | None = Field(default=None, gt=0)
    target_weight: float | None = Field(default=None, gt=0)
    weight_unit: WeightUnit = "lbs"
    target_date: datetime | None = None
    weekly_goal: float | None = None
    activity_level: ActivityLevel | None = None


class ProfileUpdate(BaseModel):
    """Body measurements for the base calorie target."""

    age: int = Field(gt=0, lt=130)
    sex: Literal["male", "female"]
    height: float = Field(gt=0)
    height_unit: Literal["in", "cm"] = "in"
    weight: float = Field(gt=0)
    weight_unit: WeightUnit = "lbs"
    activity_level: ActivityLevel = "moderate"


class MealCreate(BaseModel):
    """Calories eaten in a meal."""

    calories: float = Field(ge=0)


class EventCreate(BaseModel):
    """Scheduled calendar event."""

    title: str = Field(min_length=1)
    event_date: date
    balance_impact_type: BalanceImpact = "none"
    affects_weekly_balance: bool = True
    event_type: str | None = None
    description: str | None = None
