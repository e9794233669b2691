import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tucalendario.core.models import CalendarEvent, DatetimeEntity, NluResult  # noqa: E402
from tucalendario.infra.calendar_backend import (  # noqa: E402
    CalendarBackend,
    CalendarBackendError,
    CalendarCreateResult,
)


class FakeNluClient:
    """Returns a canned NluResult and remembers what it was asked."""

    def __init__(self, intent: str = "create_reminder", iso_value: str | None = None, body: str | None = None) -> None:
        entity = DatetimeEntity(iso_value=iso_value, matched_substring=body) if iso_value else None
        self.result = NluResult(intent_name=intent, datetime_entity=entity)
        self.calls: list[str] = []

    async def parse_message(self, text: str) -> NluResult:
        self.calls.append(text)
        return self.result


class FakeCalendarBackend(CalendarBackend):
    def __init__(self, error: str | None = None) -> None:
        self.error = error
        self.events: list[CalendarEvent] = []

    async def create_event(self, event: CalendarEvent) -> CalendarCreateResult:
        if self.error:
            raise CalendarBackendError(self.error)
        self.events.append(event)
        return CalendarCreateResult(event_id=f"evt{len(self.events)}", backend="fake")
