"""Weight logging service."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime, timedelta
from typing import Protocol
from uuid import UUID, uuid4

from wellness_engine.domain.weights import WeightChange, WeightLog
from wellness_engine.units import WEIGHT_UNITS, convert_weight

_logger = logging.getLogger(__name__)

_EDITABLE_FIELDS = frozenset({"weight", "unit", "notes", "logged_at"})


class WeightLogRepository(Protocol):
    """Persistence interface for weight logs."""

    def list_weight_logs(self, user_id: UUID) -> list[WeightLog]:
        """Return all weight logs for a user, newest first."""

    def create_weight_log(self, log: WeightLog) -> WeightLog:
        """Persist a new weight log."""

    def update_weight_log(self, log: WeightLog) -> None:
        """Persist changes to an existing weight log."""

    def delete_weight_log(self, user_id: UUID, log_id: UUID) -> bool:
        """Delete a weight log, returning False when it was absent."""


@dataclass
class WeightLogService:
    """Service for recording and querying weight logs."""

    repository: WeightLogRepository

    def add_log(
        self,
        user_id: UUID,
        weight: float,
        unit: str = "lbs",
        notes: str | None = None,
        logged_at: datetime | None = None,
    ) -> WeightLog:
        """Validate and persist a new weight reading."""
        _validate_weight(weight, unit)
        now = datetime.now(tz=UTC)
        log = WeightLog(
            id=uuid4(),
            user_id=user_id,
            weight=weight,
            unit=unit,
            notes=notes,
            logged_at=logged_at or now,
            created_at=now,
        )
        return self.repository.create_weight_log(log)

    def list_logs(self, user_id: UUID) -> list[WeightLog]:
        """Return weight logs ordered newest first."""
        return _newest_first(self.repository.list_weight_logs(user_id))

    def update_log(
        self, user_id: UUID, log_id: UUID, /, **changes: object
    ) -> WeightLog | None:
        """Correct a weight log. Returns None when the log does not exist."""
        unknown = set(changes) - _EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)}")
        current = next(
            (log for log in self.list_logs(user_id) if log.id == log_id), None
        )
        if current is None:
            return None
        updated = replace(current, **changes)
        _validate_weight(updated.weight, updated.unit)
        self.repository.update_weight_log(updated)
        return updated

    def delete_log(self, user_id: UUID, log_id: UUID) -> bool:
        """Hard delete a weight log."""
        deleted = self.repository.delete_weight_log(user_id, log_id)
        if deleted:
            _logger.info("Deleted weight log: user_id=%s log_id=%s", user_id, log_id)
        return deleted

    def get_latest_weight(self, user_id: UUID) -> WeightLog | None:
        """Return the most recent weight log by logged_at."""
        logs = self.list_logs(user_id)
        return logs[0] if logs else None

    def get_logs_in_range(
        self, user_id: UUID, start: datetime, end: datetime
    ) -> list[WeightLog]:
        """Return logs with start <= logged_at <= end, newest first."""
        return [
            log for log in self.list_logs(user_id) if start <= log.logged_at <= end
        ]

    def get_weight_trend(
        self, user_id: UUID, days: int = 30, now: datetime | None = None
    ) -> list[WeightLog]:
        """Return logs from the last ``days`` days, oldest first."""
        end = now or datetime.now(tz=UTC)
        start = end - timedelta(days=days)
        return list(reversed(self.get_logs_in_range(user_id, start, end)))

    def calculate_weight_change(
        self, user_id: UUID, unit: str | None = None
    ) -> WeightChange | None:
        """Return the change between the oldest and latest logs."""
        return calculate_weight_change(self.list_logs(user_id), unit)


def calculate_weight_change(
    logs: list[WeightLog], unit: str | None = None
) -> WeightChange | None:
    """Compute the change across logs, converting mixed units to one unit."""
    if len(logs) < 2:  # noqa: PLR2004
        return None
    ordered = _newest_first(logs)
    latest = ordered[0]
    oldest = ordered[-1]
    target_unit = unit or latest.unit
    latest_weight = convert_weight(latest.weight, latest.unit, target_unit)
    oldest_weight = convert_weight(oldest.weight, oldest.unit, target_unit)
    change = latest_weight - oldest_weight
    return WeightChange(
        change=change,
        change_percent=change / oldest_weight * 100,
        days=(latest.logged_at - oldest.logged_at).days,
        unit=target_unit,
    )


def _newest_first(logs: list[WeightLog]) -> list[WeightLog]:
    return sorted(logs, key=lambda log: log.logged_at, reverse=True)


def _validate_weight(weight: float, unit: str) -> None:
    if unit not in WEIGHT_UNITS:
        raise ValueError(f"Unknown weight unit: {unit}")
    if weight <= 0:
        raise ValueError("Weight must be positive")
