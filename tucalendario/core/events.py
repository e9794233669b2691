"""Calendar event composition.

Times are wall-clock values in the bot timezone. The API payload carries a
fixed ``-03:00`` offset next to the IANA timezone name; no DST lookup happens.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any

from tucalendario.core.models import CalendarEvent, ResolvedSchedule

BOT_NAME = "TuCalendarioBot"
DEFAULT_TIMEZONE = "America/Argentina/Buenos_Aires"
UTC_OFFSET = "-03:00"
EVENT_DURATION = timedelta(minutes=30)
POPUP_REMINDER_MINUTES = 30


def build_description(sender_name: str) -> str:
    return f"Creado por {BOT_NAME} para {sender_name}"


def compose_event(
    schedule: ResolvedSchedule,
    title: str,
    sender_name: str,
    *,
    timezone: str = DEFAULT_TIMEZONE,
) -> CalendarEvent:
    start = schedule.to_datetime()
    return CalendarEvent(
        title=title,
        start=start,
        end=start + EVENT_DURATION,
        timezone=timezone,
        description=build_description(sender_name),
    )


def format_local_iso(value: datetime) -> str:
    return value.strftime("%Y-%m-%dT%H:%M:00") + UTC_OFFSET


def to_google_payload(event: CalendarEvent) -> dict[str, Any]:
    return {
        "summary": event.title,
        "description": event.description,
        "start": {"dateTime": format_local_iso(event.start), "timeZone": event.timezone},
        "end": {"dateTime": format_local_iso(event.end), "timeZone": event.timezone},
        "reminders": {
            "useDefault": False,
            "overrides": [{"method": "popup", "minutes": POPUP_REMINDER_MINUTES}],
        },
        "visibility": "public",
    }
