"""Supabase repository for calendar events."""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from supabase import Client

from wellness_engine.domain.events import CalendarEvent
from wellness_engine.services.balance import CalendarEventRepository

_COLUMNS = (
    "id, user_id, title, description, event_date, event_type, "
    "affects_weekly_balance, balance_impact_type"
)


@dataclass
class SupabaseCalendarEventRepository(CalendarEventRepository):
    """Supabase implementation for calendar events."""

    client: Client

    def list_events(self, user_id: UUID, start: date, end: date) -> list[CalendarEvent]:
        """Return events in an inclusive date range."""
        response = (
            self.client.table("calendar_events")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .gte("event_date", start.isoformat())
            .lte("event_date", end.isoformat())
            .order("event_date", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def create_event(self, event: CalendarEvent) -> CalendarEvent:
        """Insert an event row."""
        response = (
            self.client.table("calendar_events")
            .insert(
                {
                    "id": str(event.id),
                    "user_id": str(event.user_id),
                    "title": event.title,
                    "description": event.description,
                    "event_date": event.event_date.isoformat(),
                    "event_type": event.event_type,
                    "affects_weekly_balance": event.affects_weekly_balance,
                    "balance_impact_type": event.balance_impact_type,
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create calendar event")
        return _parse_row(response.data[0])

    def delete_event(self, user_id: UUID, event_id: UUID) -> bool:
        """Delete an event row."""
        response = (
            self.client.table("calendar_events")
            .delete()
            .eq("id", str(event_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> CalendarEvent:
    # event_date may come back as a timestamp string.
    raw_date = str(row["event_date"])[:10]
    return CalendarEvent(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        title=str(row.get("title", "")),
        description=row.get("description"),
        event_date=date.fromisoformat(raw_date),
        event_type=row.get("event_type"),
        affects_weekly_balance=bool(row.get("affects_weekly_balance", True)),
        balance_impact_type=str(row.get("balance_impact_type") or "none"),
    )
