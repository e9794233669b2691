"""Calendar backend abstraction.

Provides CalendarBackend interface with two implementations:
- GoogleCalendarBackend: inserts events through the Google Calendar API
  authenticated with a service account
- DryRunCalendarBackend: logs the payload and returns a local id (DRY_RUN=1)

Factory ``get_backend()`` selects implementation based on settings.
"""

from __future__ import annotations

import abc
import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any

import httplib2
from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from tucalendario.core.events import to_google_payload
from tucalendario.core.models import CalendarEvent
from tucalendario.infra.config import Settings

LOGGER = logging.getLogger(__name__)

CALENDAR_SCOPES = ["https://www.googleapis.com/auth/calendar"]


class CalendarBackendError(RuntimeError):
    """Raised when the provider rejects or fails an event insert."""


@dataclass(frozen=True)
class CalendarCreateResult:
    event_id: str
    html_link: str | None = None
    backend: str = "google"  # "google" | "dry_run"
    debug: dict[str, Any] = field(default_factory=dict)


class CalendarBackend(abc.ABC):
    @abc.abstractmethod
    async def create_event(self, event: CalendarEvent) -> CalendarCreateResult:
        """Create a calendar event and return the result."""
        ...


class GoogleCalendarBackend(CalendarBackend):
    """Inserts events on a single fixed calendar.

    The API client is synchronous, so inserts run in a worker thread.
    """

    def __init__(
        self,
        credentials_info: dict[str, Any] | None = None,
        *,
        calendar_id: str = "primary",
        service: Any = None,
    ) -> None:
        self._credentials_info = credentials_info
        self._calendar_id = calendar_id
        self._service = service

    @property
    def calendar_id(self) -> str:
        return self._calendar_id

    def _get_service(self) -> Any:
        if self._service is None:
            if not self._credentials_info:
                raise CalendarBackendError("Google credentials are not configured")
            credentials = service_account.Credentials.from_service_account_info(
                self._credentials_info,
                scopes=CALENDAR_SCOPES,
            )
            self._service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
        return self._service

    def _insert(self, payload: dict[str, Any]) -> dict[str, Any]:
        service = self._get_service()
        return service.events().insert(calendarId=self._calendar_id, body=payload).execute()

    async def create_event(self, event: CalendarEvent) -> CalendarCreateResult:
        payload = to_google_payload(event)
        LOGGER.info(
            "Calendar insert: calendar=%s start=%s end=%s",
            self._calendar_id,
            payload["start"]["dateTime"],
            payload["end"]["dateTime"],
        )
        try:
            created = await asyncio.to_thread(self._insert, payload)
        except HttpError as exc:
            raise CalendarBackendError(_describe_http_error(exc)) from exc
        except (httplib2.HttpLib2Error, GoogleAuthError, ValueError, OSError) as exc:
            raise CalendarBackendError(str(exc)) from exc
        event_id = created.get("id")
        if not isinstance(event_id, str) or not event_id:
            raise CalendarBackendError("Google Calendar create event response missing id.")
        return CalendarCreateResult(
            event_id=event_id,
            html_link=created.get("htmlLink"),
            backend="google",
            debug={"calendar_id": self._calendar_id},
        )


class DryRunCalendarBackend(CalendarBackend):
    """Never talks to Google; used for smoke runs without credentials."""

    async def create_event(self, event: CalendarEvent) -> CalendarCreateResult:
        event_id = uuid.uuid4().hex[:8]
        LOGGER.info("DRY_RUN calendar insert: id=%s payload=%s", event_id, to_google_payload(event))
        return CalendarCreateResult(event_id=event_id, backend="dry_run")


def get_backend(settings: Settings) -> CalendarBackend:
    if settings.dry_run:
        LOGGER.info("Calendar backend: dry_run")
        return DryRunCalendarBackend()
    LOGGER.info("Calendar backend: google calendar=%s", settings.google_calendar_id)
    return GoogleCalendarBackend(
        settings.google_credentials,
        calendar_id=settings.google_calendar_id,
    )


def _describe_http_error(exc: HttpError) -> str:
    reason = getattr(exc, "reason", None)
    if isinstance(reason, str) and reason:
        return reason
    return str(exc)
