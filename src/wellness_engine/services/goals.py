"""Weight goal lifecycle and progress calculation."""

import logging
import math
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID, uuid4

from wellness_engine.domain.goals import (
    ACTIVITY_LEVELS,
    GOAL_TYPES,
    GoalProgress,
    GoalTypeInfo,
    UserGoal,
)
from wellness_engine.domain.weights import WeightLog
from wellness_engine.services.weights import WeightLogService
from wellness_engine.units import WEIGHT_UNITS, convert_weight

_logger = logging.getLogger(__name__)

ON_TRACK_TOLERANCE = 0.8
SECONDS_PER_DAY = 86400

_EDITABLE_FIELDS = frozenset(
    {
        "goal_type",
        "current_weight",
        "target_weight",
        "weight_unit",
        "target_date",
        "weekly_goal",
        "activity_level",
    }
)

_GOAL_TYPE_INFO = {
    "cutting": GoalTypeInfo(
        label="Cutting",
        description="Lose weight while maintaining muscle mass",
    ),
    "bulking": GoalTypeInfo(
        label="Bulking",
        description="Gain muscle mass and strength",
    ),
    "maintaining": GoalTypeInfo(
        label="Maintaining",
        description="Maintain current weight and composition",
    ),
}


class GoalRepository(Protocol):
    """Persistence interface for user goals."""

    def list_goals(self, user_id: UUID) -> list[UserGoal]:
        """Return all goals for a user, newest first."""

    def get_active_goal(self, user_id: UUID) -> UserGoal | None:
        """Return the active goal for a user, if any."""

    def deactivate_goals(self, user_id: UUID, completed_at: datetime) -> int:
        """Mark every active goal inactive and return how many changed."""

    def create_goal(self, goal: UserGoal) -> UserGoal:
        """Persist a new goal."""

    def update_goal(self, goal: UserGoal) -> None:
        """Persist changes to an existing goal."""


@dataclass
class GoalService:
    """Service for managing goals and reporting progress."""

    repository: GoalRepository
    weight_service: WeightLogService

    def set_user_goal(  # noqa: PLR0913
        self,
        user_id: UUID,
        goal_type: str,
        *,
        current_weight: float | None = None,
        target_weight: float | None = None,
        weight_unit: str = "lbs",
        target_date: datetime | None = None,
        weekly_goal: float | None = None,
        activity_level: str | None = None,
    ) -> UserGoal:
        """Start a new active goal, closing out any previously active goal."""
        _validate_goal_fields(goal_type, weight_unit, activity_level)
        now = datetime.now(tz=UTC)
        closed = self.repository.deactivate_goals(user_id, completed_at=now)
        if closed:
            _logger.info(
                "Deactivated previous goals: user_id=%s count=%s", user_id, closed
            )
        goal = UserGoal(
            id=uuid4(),
            user_id=user_id,
            goal_type=goal_type,
            current_weight=current_weight,
            target_weight=target_weight,
            weight_unit=weight_unit,
            target_date=target_date,
            weekly_goal=weekly_goal,
            activity_level=activity_level,
            is_active=True,
            started_at=now,
        )
        return self.repository.create_goal(goal)

    def get_active_goal(self, user_id: UUID) -> UserGoal | None:
        """Return the user's active goal."""
        return self.repository.get_active_goal(user_id)

    def list_goals(self, user_id: UUID) -> list[UserGoal]:
        """Return goal history for a user."""
        return self.repository.list_goals(user_id)

    def update_goal(
        self, user_id: UUID, goal_id: UUID, /, **changes: object
    ) -> UserGoal | None:
        """Edit goal parameters in place. Activation state is not editable."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")
        current = next(
            (goal for goal in self.list_goals(user_id) if goal.id == goal_id), None
        )
        if current is None:
            return None
        updated = replace(current, **changes)
        _validate_goal_fields(
            updated.goal_type, updated.weight_unit, updated.activity_level
        )
        self.repository.update_goal(updated)
        return updated

    def get_goal_progress(
        self, user_id: UUID, now: datetime | None = None
    ) -> GoalProgress | None:
        """Load the active goal and latest weight and compute progress."""
        goal = self.repository.get_active_goal(user_id)
        if goal is None:
            return None
        latest = self.weight_service.get_latest_weight(user_id)
        return compute_goal_progress(goal, latest, now or datetime.now(tz=UTC))


def compute_goal_progress(
    goal: UserGoal | None, latest_log: WeightLog | None, now: datetime
) -> GoalProgress | None:
    """Compute progress toward ``goal`` from the latest weight reading.

    Returns None when there is no goal, no target weight or no reading.
    The latest reading is converted to the goal's unit before comparison.
    A goal whose target equals its start weight reports 100 percent.
    ``percent_complete`` is not clamped and may overshoot or go negative.
    """
    if goal is None or goal.target_weight is None or latest_log is None:
        return None

    current_weight = convert_weight(
        latest_log.weight, latest_log.unit, goal.weight_unit
    )
    start_weight = (
        goal.current_weight if goal.current_weight is not None else current_weight
    )
    target_weight = goal.target_weight
    total_change = current_weight - start_weight
    total_goal = target_weight - start_weight
    if math.isclose(total_goal, 0.0, abs_tol=1e-9):
        percent_complete = 100.0
    else:
        percent_complete = total_change / total_goal * 100

    days_elapsed = max(_whole_days(now - goal.started_at), 0)
    days_remaining = (
        _whole_days(goal.target_date - now) if goal.target_date is not None else None
    )
    weeks_elapsed = days_elapsed / 7

    on_track = True
    expected_change = None
    if goal.weekly_goal and days_elapsed > 0:
        # Weekly goals are signed lbs/week; pace is judged on magnitude.
        weekly_rate = convert_weight(abs(goal.weekly_goal), "lbs", goal.weight_unit)
        expected_change = weekly_rate * weeks_elapsed
        on_track = abs(total_change) >= expected_change * ON_TRACK_TOLERANCE

    return GoalProgress(
        start_weight=start_weight,
        current_weight=current_weight,
        target_weight=target_weight,
        total_change=total_change,
        total_goal=total_goal,
        percent_complete=percent_complete,
        on_track=on_track,
        days_elapsed=days_elapsed,
        days_remaining=days_remaining,
        weeks_elapsed=weeks_elapsed,
        expected_change=expected_change,
        unit=goal.weight_unit,
    )


def goal_type_info(goal_type: str) -> GoalTypeInfo:
    """Return display information for a goal type."""
    try:
        return _GOAL_TYPE_INFO[goal_type]
    except KeyError:
        raise ValueError(f"Unknown goal type: {goal_type}") from None


def _whole_days(delta: timedelta) -> int:
    return math.floor(delta.total_seconds() / SECONDS_PER_DAY)


def _validate_goal_fields(
    goal_type: str, weight_unit: str, activity_level: str | None
) -> None:
    if goal_type not in GOAL_TYPES:
        raise ValueError(f"Unknown goal type: {goal_type}")
    if weight_unit not in WEIGHT_UNITS:
        raise ValueError(f"Unknown weight unit: {weight_unit}")
    if activity_level is not None and activity_level not in ACTIVITY_LEVELS:
        raise ValueError(f"Unknown activity level: {activity_level}")
