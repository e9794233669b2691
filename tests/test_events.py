from __future__ import annotations

from datetime import datetime

from tucalendario.core.events import compose_event, format_local_iso, to_google_payload
from tucalendario.core.models import ResolvedSchedule


def test_end_is_thirty_minutes_after_start() -> None:
    event = compose_event(ResolvedSchedule(2024, 6, 10, 18, 0), "Comprar pan", "Ana")
    assert event.start == datetime(2024, 6, 10, 18, 0)
    assert event.end == datetime(2024, 6, 10, 18, 30)


def test_end_rolls_over_midnight() -> None:
    event = compose_event(ResolvedSchedule(2024, 6, 10, 23, 45), "Guardia", "Ana")
    assert event.end == datetime(2024, 6, 11, 0, 15)


def test_end_rolls_over_year() -> None:
    event = compose_event(ResolvedSchedule(2024, 12, 31, 23, 50), "Brindis", "Ana")
    assert event.end == datetime(2025, 1, 1, 0, 20)


def test_local_iso_uses_fixed_offset() -> None:
    assert format_local_iso(datetime(2024, 1, 5, 7, 3)) == "2024-01-05T07:03:00-03:00"


def test_google_payload() -> None:
    event = compose_event(ResolvedSchedule(2024, 6, 10, 23, 45), "Guardia", "Ana")
    payload = to_google_payload(event)
    assert payload == {
        "summary": "Guardia",
        "description": "Creado por TuCalendarioBot para Ana",
        "start": {"dateTime": "2024-06-10T23:45:00-03:00", "timeZone": "America/Argentina/Buenos_Aires"},
        "end": {"dateTime": "2024-06-11T00:15:00-03:00", "timeZone": "America/Argentina/Buenos_Aires"},
        "reminders": {"useDefault": False, "overrides": [{"method": "popup", "minutes": 30}]},
        "visibility": "public",
    }


def test_custom_timezone_name_is_carried() -> None:
    event = compose_event(ResolvedSchedule(2024, 6, 10, 9, 0), "X", "Ana", timezone="America/Argentina/Cordoba")
    assert to_google_payload(event)["start"]["timeZone"] == "America/Argentina/Cordoba"
