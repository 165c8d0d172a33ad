"""Supabase repository for user goals."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from wellness_engine.domain.goals import UserGoal
from wellness_engine.services.goals import GoalRepository

_COLUMNS = (
    "id, user_id, goal_type, current_weight, target_weight, weight_unit, "
    "target_date, weekly_goal, activity_level, is_active, started_at, completed_at"
)


@dataclass
class SupabaseGoalRepository(GoalRepository):
    """Supabase implementation for user goals."""

    client: Client

    def list_goals(self, user_id: UUID) -> list[UserGoal]:
        """Return goals for a user, newest first."""
        response = (
            self.client.table("user_goals")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("started_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def get_active_goal(self, user_id: UUID) -> UserGoal | None:
        """Return the active goal for a user."""
        response = (
            self.client.table("user_goals")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("is_active", True)
            .order("started_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def deactivate_goals(self, user_id: UUID, completed_at: datetime) -> int:
        """Close out every active goal for a user."""
        response = (
            self.client.table("user_goals")
            .update({"is_active": False, "completed_at": completed_at.isoformat()})
            .eq("user_id", str(user_id))
            .eq("is_active", True)
            .execute()
        )
        return len(response.data or [])

    def create_goal(self, goal: UserGoal) -> UserGoal:
        """Insert a goal row."""
        response = self.client.table("user_goals").insert(_serialize(goal)).execute()
        if not response.data:
            raise RuntimeError("Failed to create goal")
        return _parse_row(response.data[0])

    def update_goal(self, goal: UserGoal) -> None:
        """Update a goal row."""
        payload = _serialize(goal)
        payload.pop("id")
        self.client.table("user_goals").update(payload).eq("id", str(goal.id)).execute()


def _serialize(goal: UserGoal) -> dict[str, object]:
    return {
        "id": str(goal.id),
        "user_id": str(goal.user_id),
        "goal_type": goal.goal_type,
        "current_weight": goal.current_weight,
        "target_weight": goal.target_weight,
        "weight_unit": goal.weight_unit,
        "target_date": _isoformat(goal.target_date),
        "weekly_goal": goal.weekly_goal,
        "activity_level": goal.activity_level,
        "is_active": goal.is_active,
        "started_at": goal.started_at.isoformat(),
        "completed_at": _isoformat(goal.completed_at),
    }


def _parse_row(row: dict[str, object]) -> UserGoal:
    return UserGoal(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        goal_type=str(row["goal_type"]),
        current_weight=_optional_float(row.get("current_weight")),
        target_weight=_optional_float(row.get("target_weight")),
        weight_unit=str(row.get("weight_unit") or "lbs"),
        target_date=_parse_datetime(row.get("target_date")),
        weekly_goal=_optional_float(row.get("weekly_goal")),
        activity_level=row.get("activity_level"),
        is_active=bool(row.get("is_active")),
        started_at=datetime.fromisoformat(str(row["started_at"])),
        completed_at=_parse_datetime(row.get("completed_at")),
    )


def _optional_float(value: object) -> float | None:
    if isinstance(value, int | float):
        return float(value)
    return None


def _parse_datetime(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None
