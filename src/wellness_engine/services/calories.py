"""Adaptive daily calorie targets and intake tracking."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from wellness_engine.domain.calories import (
    CalorieAdjustment,
    DailyCalorieTracking,
    GoalCompletionEstimate,
    WeeklyCalorieSummary,
)
from wellness_engine.domain.goals import UserGoal
from wellness_engine.services.metabolism import (
    CALORIES_PER_POUND,
    DEFAULT_WEEKLY_GOAL_LBS,
)

_logger = logging.getLogger(__name__)

HISTORY_WINDOW_DAYS = 7
MIN_HISTORY_DAYS = 3
# Shared by the target adjuster and the weekly summary so they never disagree.
DEVIATION_TOLERANCE = 0.10
MIN_DAILY_CALORIES = 1200
MAX_DAILY_CALORIES = 4000
PACE_TOLERANCE = 0.20

_REDUCE = -1
_INCREASE = 1


class CalorieTrackingRepository(Protocol):
    """Persistence interface for daily calorie tracking."""

    def get_day(self, user_id: UUID, day: date) -> DailyCalorieTracking | None:
        """Return the tracking record for a day, if present."""

    def list_recent_days(
        self, user_id: UUID, limit: int, before: date | None = None
    ) -> list[DailyCalorieTracking]:
        """Return up to ``limit`` records newest first, optionally before a day."""

    def save_day(self, tracking: DailyCalorieTracking) -> None:
        """Insert or replace the record for ``tracking.day``."""


@dataclass
class CalorieTrackingService:
    """Service for daily targets, meal intake and weekly adherence."""

    repository: CalorieTrackingRepository

    def get_or_create_today(
        self,
        user_id: UUID,
        base_target: float,
        goal: UserGoal | None,
        today: date | None = None,
    ) -> DailyCalorieTracking:
        """Return today's record, creating it from recent history on first read."""
        day = today or datetime.now(tz=UTC).date()
        existing = self.repository.get_day(user_id, day)
        if existing is not None:
            return existing

        history = self.repository.list_recent_days(
            user_id, HISTORY_WINDOW_DAYS, before=day
        )
        adjustment = compute_adaptive_calorie_target(base_target, history, goal)
        tracking = DailyCalorieTracking(
            user_id=user_id,
            day=day,
            target_calories=adjustment.daily_target,
            consumed_calories=0.0,
            is_adjusted=adjustment.is_adjusted,
            adjustment_reason=adjustment.adjustment_reason,
            original_target=adjustment.original_target,
        )
        self.repository.save_day(tracking)
        if adjustment.is_adjusted:
            _logger.info(
                "Adjusted calorie target: user_id=%s day=%s base=%s target=%s",
                user_id,
                day,
                base_target,
                adjustment.daily_target,
            )
        return tracking

    def log_meal(
        self,
        user_id: UUID,
        calories: float,
        base_target: float,
        goal: UserGoal | None,
        today: date | None = None,
    ) -> DailyCalorieTracking:
        """Add a meal's calories to today's intake. No upper bound is enforced."""
        if calories < 0:
            raise ValueError("Meal calories cannot be negative")
        current = self.get_or_create_today(user_id, base_target, goal, today)
        updated = replace(
            current, consumed_calories=current.consumed_calories + calories
        )
        self.repository.save_day(updated)
        return updated

    def get_recent_days(
        self, user_id: UUID, limit: int = HISTORY_WINDOW_DAYS
    ) -> list[DailyCalorieTracking]:
        """Return recent tracking records, newest first."""
        return self.repository.list_recent_days(user_id, limit)

    def get_weekly_summary(self, user_id: UUID) -> WeeklyCalorieSummary:
        """Summarize the most recent tracking window."""
        return compute_weekly_summary(self.get_recent_days(user_id))


def is_within_tolerance(deviation: float, total_target: float) -> bool:
    """Return True when a deviation is inside the adherence tolerance."""
    if total_target <= 0:
        return deviation == 0
    return abs(deviation) <= DEVIATION_TOLERANCE * total_target


def recent_window(
    days: Sequence[DailyCalorieTracking], size: int = HISTORY_WINDOW_DAYS
) -> list[DailyCalorieTracking]:
    """Return the newest ``size`` records by day."""
    return sorted(days, key=lambda tracking: tracking.day, reverse=True)[:size]


def compute_adaptive_calorie_target(
    base_target: float,
    recent_days: Sequence[DailyCalorieTracking],
    goal: UserGoal | None,
) -> CalorieAdjustment:
    """Adjust the base target when recent intake drifts against the goal.

    Deviation is measured against each day's own target, so earlier
    adjustments compound. A correction fires only when the window is out of
    tolerance in a direction that works against the goal: overeating while
    cutting or maintaining, undereating while bulking or maintaining. No
    active goal is treated as maintaining. The correction is the average
    daily deviation, capped at the tolerance share of the base target.
    """
    window = recent_window(recent_days)
    deviation = sum(day.consumed_calories - day.target_calories for day in window)
    total_target = sum(day.target_calories for day in window)
    on_track = is_within_tolerance(deviation, total_target)
    unadjusted = CalorieAdjustment(
        daily_target=base_target,
        is_adjusted=False,
        weekly_deviation=deviation,
        on_track=on_track,
        days_considered=len(window),
    )
    if len(window) < MIN_HISTORY_DAYS or on_track:
        return unadjusted

    direction = _correction_direction(deviation, goal)
    if direction is None:
        return unadjusted

    average_deviation = abs(deviation) / len(window)
    correction = round(min(average_deviation, DEVIATION_TOLERANCE * base_target))
    # Clamping never moves the target against the chosen direction.
    if direction == _REDUCE:
        adjusted = min(base_target, max(MIN_DAILY_CALORIES, base_target - correction))
    else:
        adjusted = max(base_target, min(MAX_DAILY_CALORIES, base_target + correction))
    if adjusted == base_target:
        return unadjusted

    change = round(abs(adjusted - base_target))
    if direction == _REDUCE:
        reason = f"Reduced by {change} cal/day to compensate for recent overeating"
    else:
        reason = f"Increased by {change} cal/day to compensate for recent undereating"
    return CalorieAdjustment(
        daily_target=adjusted,
        is_adjusted=True,
        weekly_deviation=deviation,
        on_track=on_track,
        days_considered=len(window),
        adjustment_reason=reason,
        original_target=base_target,
    )


def compute_weekly_summary(
    days: Sequence[DailyCalorieTracking],
) -> WeeklyCalorieSummary:
    """Sum targets and intake over the newest seven records."""
    window = recent_window(days)
    total_target = sum(day.target_calories for day in window)
    total_consumed = sum(day.consumed_calories for day in window)
    deviation = total_consumed - total_target
    return WeeklyCalorieSummary(
        total_target=total_target,
        total_consumed=total_consumed,
        weekly_deviation=deviation,
        average_daily_deviation=deviation / len(window) if window else 0.0,
        days_tracked=len(window),
        on_track=is_within_tolerance(deviation, total_target),
    )


def predict_goal_completion(
    current_weight_lbs: float,
    target_weight_lbs: float,
    recent_days: Sequence[DailyCalorieTracking],
    weekly_goal_lbs: float | None = None,
    today: date | None = None,
) -> GoalCompletionEstimate:
    """Project when the target weight is reached at the recent intake rate.

    The weekly rate comes from the summary deviation at 3500 kcal per pound.
    A window with no deviation falls back to the planned weekly goal. The
    user is on pace when the rate is within 20% of the planned rate.
    """
    planned_rate = abs(weekly_goal_lbs or DEFAULT_WEEKLY_GOAL_LBS)
    weekly_rate = abs(compute_weekly_summary(recent_days).weekly_deviation)
    weekly_rate /= CALORIES_PER_POUND
    remaining = abs(target_weight_lbs - current_weight_lbs)
    estimated_days = round(remaining / (weekly_rate or planned_rate) * 7)
    start = today or datetime.now(tz=UTC).date()
    return GoalCompletionEstimate(
        estimated_days=estimated_days,
        estimated_date=start + timedelta(days=estimated_days),
        weekly_rate_lbs=weekly_rate,
        on_pace=abs(weekly_rate - planned_rate) <= planned_rate * PACE_TOLERANCE,
    )


def _correction_direction(deviation: float, goal: UserGoal | None) -> int | None:
    goal_type = goal.goal_type if goal is not None else "maintaining"
    if deviation > 0 and goal_type in {"cutting", "maintaining"}:
        return _REDUCE
    if deviation < 0 and goal_type in {"bulking", "maintaining"}:
        return _INCREASE
    return None
