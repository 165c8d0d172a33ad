"""Dependency container wiring for the application."""

from dataclasses import dataclass

from supabase import create_client

from wellness_engine.adapters.supabase_calendar_event_repository import (
    SupabaseCalendarEventRepository,
)
from wellness_engine.adapters.supabase_calorie_tracking_repository import (
    SupabaseCalorieTrackingRepository,
)
from wellness_engine.adapters.supabase_goal_repository import SupabaseGoalRepository
from wellness_engine.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from wellness_engine.adapters.supabase_weight_log_repository import (
    SupabaseWeightLogRepository,
)
from wellness_engine.config import Settings
from wellness_engine.services.balance import CalendarService
from wellness_engine.services.calories import CalorieTrackingService
from wellness_engine.services.goals import GoalService
from wellness_engine.services.profiles import ProfileService
from wellness_engine.services.weights import WeightLogService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    weight_service: WeightLogService
    goal_service: GoalService
    calorie_service: CalorieTrackingService
    calendar_service: CalendarService
    profile_service: ProfileService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    weight_service = WeightLogService(SupabaseWeightLogRepository(supabase_client))
    goal_service = GoalService(
        repository=SupabaseGoalRepository(supabase_client),
        weight_service=weight_service,
    )
    return AppContainer(
        settings=resolved_settings,
        weight_service=weight_service,
        goal_service=goal_service,
        calorie_service=CalorieTrackingService(
            SupabaseCalorieTrackingRepository(supabase_client)
        ),
        calendar_service=CalendarService(
            SupabaseCalendarEventRepository(supabase_client)
        ),
        profile_service=ProfileService(SupabaseProfileRepository(supabase_client)),
    )
