from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

CREATE_REMINDER_INTENT = "create_reminder"


@dataclass(frozen=True)
class IncomingMessage:
    raw_text: str
    sender_id: int
    sender_display_name: str


@dataclass(frozen=True)
class DatetimeEntity:
    iso_value: str
    matched_substring: str | None = None


@dataclass(frozen=True)
class NluResult:
    intent_name: str
    datetime_entity: DatetimeEntity | None = None

    @property
    def is_create_reminder(self) -> bool:
        return self.intent_name == CREATE_REMINDER_INTENT


@dataclass(frozen=True)
class ResolvedSchedule:
    """Wall-clock start of an event in the bot timezone. Month is 1-based."""

    year: int
    month: int
    day: int
    hour: int
    minute: int

    def to_datetime(self) -> datetime:
        return datetime(self.year, self.month, self.day, self.hour, self.minute)

    @classmethod
    def from_datetime(cls, value: datetime) -> ResolvedSchedule:
        return cls(
            year=value.year,
            month=value.month,
            day=value.day,
            hour=value.hour,
            minute=value.minute,
        )


@dataclass(frozen=True)
class CalendarEvent:
    title: str
    start: datetime
    end: datetime
    timezone: str
    description: str
