from __future__ import annotations

from datetime import datetime
from urllib.parse import parse_qs, urlsplit

from tucalendario.core.events import compose_event
from tucalendario.core.models import ResolvedSchedule
from tucalendario.core.reply import (
    LINK_DATE_FORMAT,
    build_calendar_link,
    format_confirmation,
    format_creation_failed,
    format_date_es,
    format_time_es,
)


def _event(title: str = "Comprar pan", hour: int = 18, minute: int = 0):
    return compose_event(ResolvedSchedule(2024, 6, 10, hour, minute), title, "Ana")


def test_date_and_time_in_spanish() -> None:
    assert format_date_es(datetime(2024, 6, 10, 18, 0)) == "Lunes, 10 de junio de 2024"
    assert format_date_es(datetime(2024, 9, 4, 8, 0)) == "Miércoles, 4 de septiembre de 2024"
    assert format_time_es(datetime(2024, 6, 10, 8, 5)) == "08:05"


def test_link_dates_round_trip() -> None:
    event = _event(hour=23, minute=45)
    query = parse_qs(urlsplit(build_calendar_link(event)).query)
    start_raw, end_raw = query["dates"][0].split("/")
    assert start_raw == "20240610T234500"
    assert datetime.strptime(start_raw, LINK_DATE_FORMAT) == event.start
    assert datetime.strptime(end_raw, LINK_DATE_FORMAT) == event.end


def test_link_parameters() -> None:
    link = build_calendar_link(_event(title="Café & facturas"))
    parts = urlsplit(link)
    assert f"{parts.scheme}://{parts.netloc}{parts.path}" == "https://www.google.com/calendar/event"
    query = parse_qs(parts.query)
    assert query["action"] == ["TEMPLATE"]
    assert query["text"] == ["Café & facturas"]
    assert query["details"] == ["Creado por TuCalendarioBot"]
    assert query["ctz"] == ["America/Argentina/Buenos_Aires"]
    assert query["output"] == ["mobile"]
    assert "%20" in link and " " not in link


def test_confirmation_is_deterministic() -> None:
    event = _event()
    first = format_confirmation(event)
    assert first == format_confirmation(event)
    assert first.startswith('✅ Evento "Comprar pan"\n📅 Creado para: Lunes, 10 de junio de 2024\n🕒 Horario: 18:00\n')
    assert build_calendar_link(event) in first
    assert first.endswith("⏰ El evento incluye un recordatorio 30 minutos antes.")


def test_creation_failed() -> None:
    assert format_creation_failed("Not Found") == "❌ Error al crear el evento: Not Found"
