from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date, datetime, timedelta

# Python weekday numbering: Monday == 0.
_WEEKDAYS = {
    "lunes": 0,
    "martes": 1,
    "miércoles": 2,
    "miercoles": 2,
    "jueves": 3,
    "viernes": 4,
    "sábado": 5,
    "sabado": 5,
    "domingo": 6,
}
_WEEKDAY_RE = re.compile(
    r"\b(lunes|martes|mi[ée]rcoles|jueves|viernes|s[áa]bado|domingo)\b",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class WeekdayMatch:
    literal: str
    weekday: int


def find_weekday(text: str) -> WeekdayMatch | None:
    match = _WEEKDAY_RE.search(text or "")
    if not match:
        return None
    literal = match.group(0)
    return WeekdayMatch(literal=literal, weekday=_WEEKDAYS[literal.lower()])


def next_weekday_date(today: date, weekday: int) -> date:
    """Next date with the given weekday; today's own weekday rolls to next week."""
    offset = weekday - today.weekday()
    if offset <= 0:
        offset += 7
    return today + timedelta(days=offset)


def resolve_weekday(text: str, now: datetime) -> date | None:
    match = find_weekday(text)
    if match is None:
        return None
    return next_weekday_date(now.date(), match.weekday)
