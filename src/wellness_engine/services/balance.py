"""Weekly activity balance from scheduled calendar events."""

import logging
from collections import defaultdict
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Protocol
from uuid import UUID, uuid4

from wellness_engine.domain.events import BALANCE_IMPACTS, CalendarEvent, WeeklyBalance

_logger = logging.getLogger(__name__)

DAYS_PER_WEEK = 7
REST_RANGE = (1, 3)
ACTIVE_RANGE = (2, 4)
MODERATE_RANGE = (2, 4)

# Higher rank wins when a day has several events.
_INTENSITY_RANK = {"rest": 1, "moderate": 2, "active": 3}

BALANCED_MESSAGE = "Your weekly balance looks great! Keep up the good work."


class CalendarEventRepository(Protocol):
    """Persistence interface for calendar events."""

    def list_events(self, user_id: UUID, start: date, end: date) -> list[CalendarEvent]:
        """Return events with start <= event_date <= end."""

    def create_event(self, event: CalendarEvent) -> CalendarEvent:
        """Persist a new event."""

    def delete_event(self, user_id: UUID, event_id: UUID) -> bool:
        """Delete an event, returning False when it was absent."""


@dataclass
class CalendarService:
    """Service for scheduled events and the weekly balance view."""

    repository: CalendarEventRepository

    def add_event(  # noqa: PLR0913
        self,
        user_id: UUID,
        title: str,
        event_date: date,
        balance_impact_type: str = "none",
        *,
        affects_weekly_balance: bool = True,
        event_type: str | None = None,
        description: str | None = None,
    ) -> CalendarEvent:
        """Schedule an event."""
        if balance_impact_type not in BALANCE_IMPACTS:
            raise ValueError(f"Unknown balance impact: {balance_impact_type}")
        event = CalendarEvent(
            id=uuid4(),
            user_id=user_id,
            title=title,
            event_date=event_date,
            balance_impact_type=balance_impact_type,
            affects_weekly_balance=affects_weekly_balance,
            event_type=event_type,
            description=description,
        )
        return self.repository.create_event(event)

    def delete_event(self, user_id: UUID, event_id: UUID) -> bool:
        """Remove an event."""
        return self.repository.delete_event(user_id, event_id)

    def list_events(self, user_id: UUID, start: date, end: date) -> list[CalendarEvent]:
        """Return events in an inclusive date range."""
        return self.repository.list_events(user_id, start, end)

    def get_weekly_balance(self, user_id: UUID, week_start: date) -> WeeklyBalance:
        """Load a week's events and compute its balance."""
        week_end = week_start + timedelta(days=DAYS_PER_WEEK - 1)
        events = self.repository.list_events(user_id, week_start, week_end)
        balance = compute_weekly_balance(events, week_start)
        _logger.debug(
            "Weekly balance: user_id=%s week_start=%s rest=%s moderate=%s active=%s",
            user_id,
            week_start,
            balance.rest_days,
            balance.moderate_days,
            balance.active_days,
        )
        return balance


def classify_day(events: Iterable[CalendarEvent]) -> str | None:
    """Return the highest intensity impact among a day's events.

    Days with no events, or only ``none``-impact events, are unplanned.
    """
    impacts = [
        event.balance_impact_type
        for event in events
        if event.balance_impact_type in _INTENSITY_RANK
    ]
    if not impacts:
        return None
    return max(impacts, key=_INTENSITY_RANK.__getitem__)


def compute_weekly_balance(
    events: Iterable[CalendarEvent], week_start: date
) -> WeeklyBalance:
    """Count rest, moderate and active days in the week starting ``week_start``."""
    week_end = week_start + timedelta(days=DAYS_PER_WEEK - 1)
    by_day: dict[date, list[CalendarEvent]] = defaultdict(list)
    for event in events:
        if not event.affects_weekly_balance:
            continue
        if week_start <= event.event_date <= week_end:
            by_day[event.event_date].append(event)

    counts = {"rest": 0, "moderate": 0, "active": 0}
    for day_events in by_day.values():
        bucket = classify_day(day_events)
        if bucket is not None:
            counts[bucket] += 1

    problems = _balance_problems(counts["rest"], counts["active"], counts["moderate"])
    return WeeklyBalance(
        week_start=week_start,
        rest_days=counts["rest"],
        moderate_days=counts["moderate"],
        active_days=counts["active"],
        is_balanced=not problems,
        recommendation=" ".join(problems) if problems else BALANCED_MESSAGE,
    )


def _balance_problems(
    rest_days: int, active_days: int, moderate_days: int
) -> list[str]:
    problems = []
    if rest_days < REST_RANGE[0]:
        problems.append("Too few rest days: schedule at least one day to recover.")
    elif rest_days > REST_RANGE[1]:
        problems.append("Too many rest days: swap a rest day for moderate activity.")
    if active_days < ACTIVE_RANGE[0]:
        problems.append("Too few active days: add a higher-intensity session.")
    elif active_days > ACTIVE_RANGE[1]:
        problems.append(
            "Too many active days: replace a hard session with rest or "
            "gentle movement."
        )
    if moderate_days < MODERATE_RANGE[0]:
        problems.append("Too few moderate days: add a walk or light workout.")
    elif moderate_days > MODERATE_RANGE[1]:
        problems.append("Too many moderate days: turn one into a rest or active day.")
    return problems
