from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from types import SimpleNamespace
from zoneinfo import ZoneInfo

from conftest import FakeCalendarBackend, FakeNluClient
from tucalendario.bot import handlers
from tucalendario.core import reply
from tucalendario.core.reminder_service import ReminderService

TZ = ZoneInfo("America/Argentina/Buenos_Aires")


class DummyMessage:
    def __init__(self, text: str | None) -> None:
        self.text = text
        self.message_id = 7
        self.replies: list[str] = []

    async def reply_text(self, text, **kwargs):
        self.replies.append(text)


def _build_update(text: str | None, first_name: str | None = "Ana") -> SimpleNamespace:
    message = DummyMessage(text)
    return SimpleNamespace(
        effective_user=SimpleNamespace(id=42, first_name=first_name),
        effective_chat=SimpleNamespace(id=10),
        effective_message=message,
        message=message,
    )


class DummyApplication:
    def __init__(self, service: ReminderService) -> None:
        self.bot_data = {"reminder_service": service}
        self.errors: list[Exception] = []

    async def process_error(self, update, error):
        self.errors.append(error)


def _build_context(nlu, backend: FakeCalendarBackend | None = None) -> SimpleNamespace:
    service = ReminderService(
        nlu_client=nlu,
        calendar_backend=backend or FakeCalendarBackend(),
        tz=TZ,
        clock=lambda: datetime(2024, 6, 10, 12, 0, tzinfo=TZ),
    )
    return SimpleNamespace(application=DummyApplication(service), chat_data={}, error=None)


def test_chat_creates_event_and_replies(caplog) -> None:
    caplog.set_level(logging.INFO, logger=handlers.LOGGER.name)
    backend = FakeCalendarBackend()
    context = _build_context(FakeNluClient(iso_value="2024-06-11T18:00:00-03:00", body="mañana"), backend)
    update = _build_update("recordarme comprar pan mañana a las 18hs")

    asyncio.run(handlers.chat(update, context))

    [event] = backend.events
    assert event.title == "Comprar pan"
    assert update.effective_message.replies == [reply.format_confirmation(event)]
    summary = json.loads(caplog.records[-1].message)
    assert summary["event"] == "request.summary"
    assert summary["outcome"] == "created"
    assert summary["status"] == "ok"
    assert summary["message_id"] == 7
    assert summary["received_at"].endswith("+00:00")
    assert "comprar pan" not in caplog.records[-1].message


def test_chat_uses_default_sender_name() -> None:
    backend = FakeCalendarBackend()
    context = _build_context(FakeNluClient(iso_value="2024-06-11T18:00:00-03:00"), backend)
    asyncio.run(handlers.chat(_build_update("recordarme algo mañana", first_name=None), context))
    assert backend.events[0].description == "Creado por TuCalendarioBot para Usuario"


def test_chat_unknown_intent() -> None:
    context = _build_context(FakeNluClient(intent="none"))
    update = _build_update("qué onda")
    asyncio.run(handlers.chat(update, context))
    assert update.effective_message.replies == [reply.UNKNOWN_INTENT_REPLY]


def test_chat_forwards_nlu_failure_to_error_handler() -> None:
    class BrokenNlu:
        async def parse_message(self, text: str):
            raise RuntimeError("Wit.ai request failed: timeout")

    context = _build_context(BrokenNlu())
    update = _build_update("recordarme algo")
    asyncio.run(handlers.chat(update, context))
    assert [str(e) for e in context.application.errors] == ["Wit.ai request failed: timeout"]
    assert update.effective_message.replies == []


def test_chat_ignores_empty_text() -> None:
    nlu = FakeNluClient()
    context = _build_context(nlu)
    asyncio.run(handlers.chat(_build_update(None), context))
    assert nlu.calls == []


def test_start_and_help() -> None:
    context = _build_context(FakeNluClient())
    update = _build_update("/start")
    asyncio.run(handlers.start(update, context))
    asyncio.run(handlers.help_command(update, context))
    assert update.effective_message.replies == [reply.START_REPLY, reply.HELP_REPLY]


def test_error_handler_replies_generic_error(monkeypatch) -> None:
    monkeypatch.setattr(handlers, "Update", SimpleNamespace)
    update = _build_update("recordarme algo")
    context = SimpleNamespace(error=RuntimeError("boom"), chat_data={})
    asyncio.run(handlers.error_handler(update, context))
    assert update.effective_message.replies == [reply.GENERIC_ERROR_REPLY]
