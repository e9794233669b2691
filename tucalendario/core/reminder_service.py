from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from tucalendario.core import reply
from tucalendario.core.events import compose_event
from tucalendario.core.models import IncomingMessage
from tucalendario.core.schedule import parse_nlu_datetime, resolve_schedule
from tucalendario.core.title_cleaner import clean_title
from tucalendario.infra.calendar_backend import CalendarBackend, CalendarBackendError
from tucalendario.infra.wit_client import NluClient

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReminderReply:
    text: str
    outcome: str  # "created" | "unknown_intent" | "missing_date" | "calendar_error"
    event_id: str | None = None


class ReminderService:
    """Turns one incoming message into one reply. Holds no per-message state."""

    def __init__(
        self,
        *,
        nlu_client: NluClient,
        calendar_backend: CalendarBackend,
        tz: ZoneInfo,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._nlu = nlu_client
        self._calendar = calendar_backend
        self._tz = tz
        self._clock = clock or (lambda: datetime.now(tz))

    async def handle(self, message: IncomingMessage) -> ReminderReply:
        text = message.raw_text
        nlu = await self._nlu.parse_message(text)
        if not nlu.is_create_reminder:
            return ReminderReply(reply.UNKNOWN_INTENT_REPLY, "unknown_intent")

        entity = nlu.datetime_entity
        if entity is None:
            return ReminderReply(reply.MISSING_DATE_REPLY, "missing_date")
        try:
            base = parse_nlu_datetime(entity.iso_value, self._tz)
        except ValueError:
            LOGGER.warning("Unparseable NLU datetime: %r", entity.iso_value)
            return ReminderReply(reply.MISSING_DATE_REPLY, "missing_date")

        resolution = resolve_schedule(text, base, now=self._clock(), tz=self._tz)
        title = clean_title(
            text,
            nlu_substring=entity.matched_substring,
            clock_literals=resolution.time.literals,
            weekday_literal=resolution.weekday.literal if resolution.weekday else None,
        )
        event = compose_event(
            resolution.schedule,
            title,
            message.sender_display_name,
            timezone=self._tz.key,
        )
        LOGGER.info(
            "Reminder resolved: sender_id=%s base=%s start=%s",
            message.sender_id,
            base.isoformat(),
            event.start.isoformat(),
        )

        try:
            created = await self._calendar.create_event(event)
        except CalendarBackendError as exc:
            LOGGER.exception("Calendar event creation failed: sender_id=%s", message.sender_id)
            return ReminderReply(reply.format_creation_failed(str(exc)), "calendar_error")

        LOGGER.info("Calendar event created: id=%s backend=%s", created.event_id, created.backend)
        return ReminderReply(reply.format_confirmation(event), "created", event_id=created.event_id)
