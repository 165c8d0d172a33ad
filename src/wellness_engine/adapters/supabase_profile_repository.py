"""Supabase repository for metabolic profiles."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from wellness_engine.domain.calories import MetabolicProfile
from wellness_engine.services.profiles import ProfileRepository


@dataclass
class SupabaseProfileRepository(ProfileRepository):
    """Supabase implementation for metabolic profiles."""

    client: Client

    def get_profile(self, user_id: UUID) -> MetabolicProfile | None:
        """Return the stored profile for a user."""
        response = (
            self.client.table("metabolic_profiles")
            .select("user_id, age, sex, height_inches, weight_lbs, activity_level")
            .eq("user_id", str(user_id))
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        return MetabolicProfile(
            user_id=UUID(str(row["user_id"])),
            age=int(row["age"]),
            sex=str(row["sex"]),
            height_inches=float(row["height_inches"]),
            weight_lbs=float(row["weight_lbs"]),
            activity_level=str(row["activity_level"]),
        )

    def save_profile(self, profile: MetabolicProfile) -> None:
        """Upsert a user's profile."""
        self.client.table("metabolic_profiles").upsert(
            {
                "user_id": str(profile.user_id),
                "age": profile.age,
                "sex": profile.sex,
                "height_inches": profile.height_inches,
                "weight_lbs": profile.weight_lbs,
                "activity_level": profile.activity_level,
                "updated_at": datetime.now(tz=UTC).isoformat(),
            },
            on_conflict="user_id",
        ).execute()
