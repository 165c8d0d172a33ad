"""Supabase repository for daily calorie tracking."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from wellness_engine.domain.calories import DailyCalorieTracking
from wellness_engine.services.calories import CalorieTrackingRepository

_COLUMNS = (
    "user_id, day, target_calories, consumed_calories, is_adjusted, "
    "adjustment_reason, original_target"
)


@dataclass
class SupabaseCalorieTrackingRepository(CalorieTrackingRepository):
    """Supabase implementation for daily calorie tracking."""

    client: Client

    def get_day(self, user_id: UUID, day: date) -> DailyCalorieTracking | None:
        """Return the tracking row for a day."""
        response = (
            self.client.table("daily_calorie_tracking")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .eq("day", day.isoformat())
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_recent_days(
        self, user_id: UUID, limit: int, before: date | None = None
    ) -> list[DailyCalorieTracking]:
        """Return recent tracking rows, newest first."""
        query = (
            self.client.table("daily_calorie_tracking")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
        )
        if before is not None:
            query = query.lt("day", before.isoformat())
        response = query.order("day", desc=True).limit(limit).execute()
        return [_parse_row(row) for row in response.data or []]

    def save_day(self, tracking: DailyCalorieTracking) -> None:
        """Upsert the tracking row keyed by user and day."""
        self.client.table("daily_calorie_tracking").upsert(
            {
                "user_id": str(tracking.user_id),
                "day": tracking.day.isoformat(),
                "target_calories": tracking.target_calories,
                "consumed_calories": tracking.consumed_calories,
                "remaining_calories": tracking.remaining_calories,
                "is_adjusted": tracking.is_adjusted,
                "adjustment_reason": tracking.adjustment_reason,
                "original_target": tracking.original_target,
            },
            on_conflict="user_id,day",
        ).execute()


def _parse_row(row: dict[str, object]) -> DailyCalorieTracking:
    original = row.get("original_target")
    return DailyCalorieTracking(
        user_id=UUID(str(row["user_id"])),
        day=date.fromisoformat(str(row["day"])),
        target_calories=float(row.get("target_calories", 0.0)),
        consumed_calories=float(row.get("consumed_calories", 0.0)),
        is_adjusted=bool(row.get("is_adjusted")),
        adjustment_reason=row.get("adjustment_reason"),
        original_target=float(original) if isinstance(original, int | float) else None,
    )
