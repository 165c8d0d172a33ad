"""Metabolic profile service."""

from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from wellness_engine.domain.calories import BaseCalorieTarget, MetabolicProfile
from wellness_engine.domain.goals import ACTIVITY_LEVELS, UserGoal
from wellness_engine.services.metabolism import calculate_base_target


class ProfileRepository(Protocol):
    """Persistence interface for metabolic profiles."""

    def get_profile(self, user_id: UUID) -> MetabolicProfile | None:
        """Return the stored profile for a user."""

    def save_profile(self, profile: MetabolicProfile) -> None:
        """Insert or replace a user's profile."""


@dataclass
class ProfileService:
    """Service for metabolic profiles and the base calorie target."""

    repository: ProfileRepository

    def get_profile(self, user_id: UUID) -> MetabolicProfile | None:
        """Return the user's profile, if set."""
        return self.repository.get_profile(user_id)

    def save_profile(self, profile: MetabolicProfile) -> MetabolicProfile:
        """Validate and persist a profile."""
        if profile.sex not in {"male", "female"}:
            raise ValueError(f"Unknown sex: {profile.sex}")
        if profile.activity_level not in ACTIVITY_LEVELS:
            raise ValueError(f"Unknown activity level: {profile.activity_level}")
        if profile.age <= 0 or profile.height_inches <= 0 or profile.weight_lbs <= 0:
            raise ValueError("Age, height and weight must be positive")
        self.repository.save_profile(profile)
        return profile

    def base_target_for(
        self, user_id: UUID, goal: UserGoal | None
    ) -> BaseCalorieTarget | None:
        """Return the base target, or None when no profile is stored."""
        profile = self.repository.get_profile(user_id)
        if profile is None:
            return None
        return calculate_base_target(profile, goal)
