from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from zoneinfo import ZoneInfo

from tucalendario.core.models import ResolvedSchedule
from tucalendario.core.time_extract import ExtractedTime, extract_time
from tucalendario.core.weekdays import WeekdayMatch, find_weekday, next_weekday_date

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScheduleResolution:
    schedule: ResolvedSchedule
    time: ExtractedTime
    weekday: WeekdayMatch | None


def parse_nlu_datetime(value: str, tz: ZoneInfo) -> datetime:
    """Parse the NLU ISO value into a naive wall-clock datetime in ``tz``.

    Raises ValueError for anything ``datetime.fromisoformat`` rejects.
    """
    parsed = datetime.fromisoformat(value.strip())
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz).replace(tzinfo=None)
    return parsed


def resolve_schedule(text: str, base: datetime, *, now: datetime, tz: ZoneInfo) -> ScheduleResolution:
    local_now = now.astimezone(tz) if now.tzinfo is not None else now
    weekday = find_weekday(text)
    target_date = base.date()
    if weekday is not None:
        target_date = next_weekday_date(local_now.date(), weekday.weekday)
        LOGGER.debug("Weekday override: literal=%s date=%s", weekday.literal, target_date.isoformat())
    extracted = extract_time(text, base=base)
    schedule = ResolvedSchedule(
        year=target_date.year,
        month=target_date.month,
        day=target_date.day,
        hour=extracted.hour,
        minute=extracted.minute,
    )
    return ScheduleResolution(schedule=schedule, time=extracted, weekday=weekday)
