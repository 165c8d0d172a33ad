"""FastAPI application factory."""

import logging
from dataclasses import asdict
from datetime import date, datetime, timedelta
from uuid import UUID
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from wellness_engine.api.models import (
    EventCreate,
    GoalCreate,
    MealCreate,
    ProfileUpdate,
    WeightLogCreate,
    WeightLogUpdate,
)
from wellness_engine.app_logging import configure_logging
from wellness_engine.containers import AppContainer
from wellness_engine.domain.calories import (
    BaseCalorieTarget,
    DailyCalorieTracking,
    MetabolicProfile,
)
from wellness_engine.domain.events import CalendarEvent, WeeklyBalance
from wellness_engine.domain.goals import UserGoal
from wellness_engine.domain.weights import WeightLog
from wellness_engine.services.calories import predict_goal_completion
from wellness_engine.services.goals import goal_type_info
from wellness_engine.services.metabolism import calculate_macros
from wellness_engine.units import HeightValue, convert_to_inches, convert_weight


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI(title="Wellness Engine")
    app.state.container = container

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        logger.warning("Rejected request to %s: %s", request.url.path, exc)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/users/{user_id}/weights")
    async def list_weights(user_id: UUID, request: Request) -> dict[str, object]:
        """Return all weight logs, newest first."""
        logs = _container(request).weight_service.list_logs(user_id)
        return {"logs": [_serialize_weight_log(log) for log in logs]}

    @app.post("/users/{user_id}/weights", status_code=status.HTTP_201_CREATED)
    async def add_weight(
        user_id: UUID, payload: WeightLogCreate, request: Request
    ) -> dict[str, object]:
        """Record a weight reading."""
        log = _container(request).weight_service.add_log(
            user_id,
            payload.weight,
            unit=payload.unit,
            notes=payload.notes,
            logged_at=payload.logged_at,
        )
        return _serialize_weight_log(log)

    @app.patch("/users/{user_id}/weights/{log_id}")
    async def update_weight(
        user_id: UUID, log_id: UUID, payload: WeightLogUpdate, request: Request
    ) -> dict[str, object]:
        """Correct a weight reading."""
        # Only notes may be cleared with an explicit null.
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field == "notes"
        }
        log = _container(request).weight_service.update_log(user_id, log_id, **changes)
        if log is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return _serialize_weight_log(log)

    @app.delete("/users/{user_id}/weights/{log_id}")
    async def delete_weight(
        user_id: UUID, log_id: UUID, request: Request
    ) -> dict[str, str]:
        """Delete a weight reading."""
        if not _container(request).weight_service.delete_log(user_id, log_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "deleted"}

    @app.get("/users/{user_id}/weights/latest")
    async def latest_weight(user_id: UUID, request: Request) -> dict[str, object]:
        """Return the most recent weight reading."""
        log = _container(request).weight_service.get_latest_weight(user_id)
        return {"latest": _serialize_weight_log(log) if log else None}

    @app.get("/users/{user_id}/weights/trend")
    async def weight_trend(
        user_id: UUID, request: Request, days: int = 30
    ) -> dict[str, object]:
        """Return recent readings, oldest first."""
        logs = _container(request).weight_service.get_weight_trend(user_id, days=days)
        return {"logs": [_serialize_weight_log(log) for log in logs]}

    @app.get("/users/{user_id}/weights/change")
    async def weight_change(
        user_id: UUID, request: Request, unit: str | None = None
    ) -> dict[str, object]:
        """Return the change between the oldest and latest readings."""
        change = _container(request).weight_service.calculate_weight_change(
            user_id, unit=unit
        )
        return {"change": asdict(change) if change else None}

    @app.post("/users/{user_id}/goals", status_code=status.HTTP_201_CREATED)
    async def set_goal(
        user_id: UUID, payload: GoalCreate, request: Request
    ) -> dict[str, object]:
        """Start a new goal, deactivating the previous one."""
        goal = _container(request).goal_service.set_user_goal(
            user_id, **payload.model_dump()
        )
        return _serialize_goal(goal)

    @app.get("/users/{user_id}/goals")
    async def list_goals(user_id: UUID, request: Request) -> dict[str, object]:
        """Return goal history."""
        goals = _container(request).goal_service.list_goals(user_id)
        return {"goals": [_serialize_goal(goal) for goal in goals]}

    @app.get("/users/{user_id}/goals/active")
    async def active_goal(user_id: UUID, request: Request) -> dict[str, object]:
        """Return the active goal."""
        goal = _container(request).goal_service.get_active_goal(user_id)
        return {"goal": _serialize_goal(goal) if goal else None}

    @app.get("/users/{user_id}/goals/progress")
    async def goal_progress(user_id: UUID, request: Request) -> dict[str, object]:
        """Return progress toward the active goal."""
        progress = _container(request).goal_service.get_goal_progress(user_id)
        return {"progress": asdict(progress) if progress else None}

    @app.get("/users/{user_id}/goals/prediction")
    async def goal_prediction(user_id: UUID, request: Request) -> dict[str, object]:
        """Estimate when the active goal is reached at the recent intake rate."""
        state_container = _container(request)
        goal = state_container.goal_service.get_active_goal(user_id)
        latest = state_container.weight_service.get_latest_weight(user_id)
        if goal is None or goal.target_weight is None or latest is None:
            return {"prediction": None}
        estimate = predict_goal_completion(
            convert_weight(latest.weight, latest.unit, "lbs"),
            convert_weight(goal.target_weight, goal.weight_unit, "lbs"),
            state_container.calorie_service.get_recent_days(user_id),
            weekly_goal_lbs=goal.weekly_goal,
        )
        return {"prediction": asdict(estimate)}

    @app.put("/users/{user_id}/profile")
    async def save_profile(
        user_id: UUID, payload: ProfileUpdate, request: Request
    ) -> dict[str, object]:
        """Store body measurements and return the derived base target."""
        state_container = _container(request)
        profile = state_container.profile_service.save_profile(
            MetabolicProfile(
                user_id=user_id,
                age=payload.age,
                sex=payload.sex,
                height_inches=convert_to_inches(
                    HeightValue(value=payload.height, unit=payload.height_unit)
                ),
                weight_lbs=convert_weight(payload.weight, payload.weight_unit, "lbs"),
                activity_level=payload.activity_level,
            )
        )
        goal = state_container.goal_service.get_active_goal(user_id)
        base = state_container.profile_service.base_target_for(user_id, goal)
        return {
            "profile": asdict(profile),
            "base_target": asdict(base) if base else None,
        }

    @app.get("/users/{user_id}/calories/today")
    async def calories_today(
        user_id: UUID, request: Request, timezone: str | None = None
    ) -> dict[str, object]:
        """Return today's target and intake, creating the record on first read."""
        state_container = _container(request)
        goal, base = _resolve_base_target(state_container, user_id)
        tracking = state_container.calorie_service.get_or_create_today(
            user_id,
            base.daily_target,
            goal,
            today=_today(timezone or state_container.settings.default_timezone),
        )
        return _serialize_tracking(tracking)

    @app.post("/users/{user_id}/calories/meals")
    async def log_meal(
        user_id: UUID,
        payload: MealCreate,
        request: Request,
        timezone: str | None = None,
    ) -> dict[str, object]:
        """Add a meal's calories to today's intake."""
        state_container = _container(request)
        goal, base = _resolve_base_target(state_container, user_id)
        tracking = state_container.calorie_service.log_meal(
            user_id,
            payload.calories,
            base.daily_target,
            goal,
            today=_today(timezone or state_container.settings.default_timezone),
        )
        return _serialize_tracking(tracking)

    @app.get("/users/{user_id}/calories/week")
    async def calories_week(user_id: UUID, request: Request) -> dict[str, object]:
        """Return the weekly adherence summary."""
        summary = _container(request).calorie_service.get_weekly_summary(user_id)
        return asdict(summary)

    @app.get("/users/{user_id}/calories/macros")
    async def calorie_macros(user_id: UUID, request: Request) -> dict[str, object]:
        """Split the base target into macronutrient grams."""
        state_container = _container(request)
        goal, base = _resolve_base_target(state_container, user_id)
        profile = state_container.profile_service.get_profile(user_id)
        macros = calculate_macros(
            base.daily_target,
            profile.weight_lbs,
            goal.goal_type if goal else "maintaining",
        )
        return asdict(macros)

    @app.get("/users/{user_id}/events")
    async def list_events(
        user_id: UUID, start: date, end: date, request: Request
    ) -> dict[str, object]:
        """Return events in an inclusive date range."""
        events = _container(request).calendar_service.list_events(user_id, start, end)
        return {"events": [_serialize_event(event) for event in events]}

    @app.post("/users/{user_id}/events", status_code=status.HTTP_201_CREATED)
    async def add_event(
        user_id: UUID, payload: EventCreate, request: Request
    ) -> dict[str, object]:
        """Schedule an event."""
        event = _container(request).calendar_service.add_event(
            user_id,
            payload.title,
            payload.event_date,
            payload.balance_impact_type,
            affects_weekly_balance=payload.affects_weekly_balance,
            event_type=payload.event_type,
            description=payload.description,
        )
        return _serialize_event(event)

    @app.delete("/users/{user_id}/events/{event_id}")
    async def delete_event(
        user_id: UUID, event_id: UUID, request: Request
    ) -> dict[str, str]:
        """Remove an event."""
        if not _container(request).calendar_service.delete_event(user_id, event_id):
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return {"status": "deleted"}

    @app.get("/users/{user_id}/balance")
    async def weekly_balance(
        user_id: UUID,
        request: Request,
        week_start: date | None = None,
        timezone: str | None = None,
    ) -> dict[str, object]:
        """Return the activity balance for a week (default: the current week)."""
        state_container = _container(request)
        start = week_start or start_of_week(
            _today(timezone or state_container.settings.default_timezone)
        )
        balance = state_container.calendar_service.get_weekly_balance(user_id, start)
        return _serialize_balance(balance)

    return app


def start_of_week(day: date) -> date:
    """Return the Sunday on or before ``day``."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def _container(request: Request) -> AppContainer:
    return request.app.state.container


def _today(timezone_name: str) -> date:
    try:
        tz = ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown timezone: {timezone_name}",
        ) from None
    return datetime.now(tz=tz).date()


def _resolve_base_target(
    state_container: AppContainer, user_id: UUID
) -> tuple[UserGoal | None, BaseCalorieTarget]:
    goal = state_container.goal_service.get_active_goal(user_id)
    base = state_container.profile_service.base_target_for(user_id, goal)
    if base is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Metabolic profile is not set",
        )
    return goal, base


def _serialize_weight_log(log: WeightLog) -> dict[str, object]:
    return {
        "id": str(log.id),
        "weight": log.weight,
        "unit": log.unit,
        "notes": log.notes,
        "logged_at": log.logged_at.isoformat(),
    }


def _serialize_goal(goal: UserGoal) -> dict[str, object]:
    payload = asdict(goal)
    payload["label"] = goal_type_info(goal.goal_type).label
    return payload


def _serialize_tracking(tracking: DailyCalorieTracking) -> dict[str, object]:
    payload = asdict(tracking)
    payload["remaining_calories"] = tracking.remaining_calories
    return payload


def _serialize_event(event: CalendarEvent) -> dict[str, object]:
    return asdict(event)


def _serialize_balance(balance: WeeklyBalance) -> dict[str, object]:
    payload = asdict(balance)
    payload["planned_days"] = balance.planned_days
    payload["balance_score"] = balance.balance_score
    return payload
