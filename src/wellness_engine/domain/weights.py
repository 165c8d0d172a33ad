"""Domain models for body weight logging."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class WeightLog:
    """A single body weight reading."""

    id: UUID
    user_id: UUID
    weight: float
    unit: str
    logged_at: datetime
    created_at: datetime
    notes: str | None = None


@dataclass(frozen=True)
class WeightChange:
    """Change between the oldest and latest weight readings."""

    change: float
    change_percent: float
    days: int
    unit: str
