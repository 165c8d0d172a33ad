"""Supabase repository for weight logs."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from wellness_engine.domain.weights import WeightLog
from wellness_engine.services.weights import WeightLogRepository

_COLUMNS = "id, user_id, weight, unit, notes, logged_at, created_at"


@dataclass
class SupabaseWeightLogRepository(WeightLogRepository):
    """Supabase implementation for weight logs."""

    client: Client

    def list_weight_logs(self, user_id: UUID) -> list[WeightLog]:
        """Return weight logs for a user, newest first."""
        response = (
            self.client.table("weight_logs")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order("logged_at", desc=True)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def create_weight_log(self, log: WeightLog) -> WeightLog:
        """Insert a weight log row."""
        response = self.client.table("weight_logs").insert(_serialize(log)).execute()
        if not response.data:
            raise RuntimeError("Failed to create weight log")
        return _parse_row(response.data[0])

    def update_weight_log(self, log: WeightLog) -> None:
        """Update the editable columns of a weight log."""
        self.client.table("weight_logs").update(
            {
                "weight": log.weight,
                "unit": log.unit,
                "notes": log.notes,
                "logged_at": log.logged_at.isoformat(),
            }
        ).eq("id", str(log.id)).eq("user_id", str(log.user_id)).execute()

    def delete_weight_log(self, user_id: UUID, log_id: UUID) -> bool:
        """Delete a weight log row."""
        response = (
            self.client.table("weight_logs")
            .delete()
            .eq("id", str(log_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _serialize(log: WeightLog) -> dict[str, object]:
    return {
        "id": str(log.id),
        "user_id": str(log.user_id),
        "weight": log.weight,
        "unit": log.unit,
        "notes": log.notes,
        "logged_at": log.logged_at.isoformat(),
        "created_at": log.created_at.isoformat(),
    }


def _parse_row(row: dict[str, object]) -> WeightLog:
    logged_at = datetime.fromisoformat(str(row["logged_at"]))
    created_raw = row.get("created_at")
    return WeightLog(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        weight=float(row.get("weight", 0.0)),
        unit=str(row.get("unit") or "lbs"),
        notes=row.get("notes"),
        logged_at=logged_at,
        created_at=(
            datetime.fromisoformat(created_raw)
            if isinstance(created_raw, str) and created_raw
            else logged_at
        ),
    )
