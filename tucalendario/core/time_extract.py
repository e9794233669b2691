"""Clock time extraction for Spanish reminder text.

The extractor is an ordered list of named rules. Each rule is a pure function
``(text, guess) -> guess`` and later rules override earlier ones when they
match. ``extract_time`` folds the rules over an initial guess and then applies
``validate_time`` so the result always carries a usable hour and minute.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Sequence
from dataclasses import dataclass, replace
from datetime import datetime
from functools import reduce

DEFAULT_HOUR = 9
DEFAULT_MINUTE = 0

_CLOCK_RE = re.compile(
    r"\b(?P<hour>\d{1,2})(?::(?P<minute>\d{1,2}))?\s*(?:hrs|hs|horas|h)\b"
    r"|\b(?P<bare_hour>\d{1,2}):(?P<bare_minute>\d{2})\b",
    re.IGNORECASE,
)
_TWELVE_HOUR_RE = re.compile(
    r"\b(?P<hour>\d{1,2})(?::(?P<minute>\d{2}))?\s*(?P<meridiem>[ap])\.?\s?m\.?(?!\w)",
    re.IGNORECASE,
)
_MORNING_RE = re.compile(r"(?<!pasado\s)\bma[ñn]ana\b", re.IGNORECASE)
_LATE_DAY_RE = re.compile(r"\b(?:tarde|noche)\b", re.IGNORECASE)


@dataclass(frozen=True)
class TimeGuess:
    hour: int | None = None
    minute: int | None = None
    explicit: bool = False
    base: datetime | None = None
    literals: tuple[str, ...] = ()


@dataclass(frozen=True)
class ExtractedTime:
    hour: int
    minute: int
    explicit: bool
    literals: tuple[str, ...]


TimeRule = Callable[[str, TimeGuess], TimeGuess]


def explicit_clock(text: str, guess: TimeGuess) -> TimeGuess:
    """'14hs', '9:30hs', '8h', '10 horas' or a bare '18:45'."""
    match = _CLOCK_RE.search(text)
    if not match:
        return guess
    hour_raw = match.group("hour") or match.group("bare_hour")
    minute_raw = match.group("minute") or match.group("bare_minute")
    return replace(
        guess,
        hour=int(hour_raw),
        minute=int(minute_raw) if minute_raw else 0,
        explicit=True,
        literals=guess.literals + (match.group(0),),
    )


def nlu_fallback(text: str, guess: TimeGuess) -> TimeGuess:
    if guess.explicit or guess.base is None:
        return guess
    return replace(guess, hour=guess.base.hour, minute=guess.base.minute)


def twelve_hour(text: str, guess: TimeGuess) -> TimeGuess:
    """'8pm', '9:15am', '7 p.m.' win over anything found before."""
    match = _TWELVE_HOUR_RE.search(text)
    if not match:
        return guess
    hour = int(match.group("hour"))
    minute = int(match.group("minute")) if match.group("minute") else 0
    meridiem = match.group("meridiem").lower()
    if meridiem == "p" and hour < 12:
        hour += 12
    elif meridiem == "a" and hour == 12:
        hour = 0
    literal = match.group(0)
    # Drop an earlier clock literal that is part of this one ("9:30" in "9:30 pm").
    literals = tuple(item for item in guess.literals if item not in literal) + (literal,)
    return replace(guess, hour=hour, minute=minute, literals=literals)


def day_part(text: str, guess: TimeGuess) -> TimeGuess:
    if guess.hour is None:
        return guess
    if _MORNING_RE.search(text):
        return guess
    if _LATE_DAY_RE.search(text) and guess.hour < 12 and not guess.explicit:
        return replace(guess, hour=guess.hour + 12)
    return guess


DEFAULT_RULES: tuple[TimeRule, ...] = (explicit_clock, nlu_fallback, twelve_hour, day_part)


def validate_time(guess: TimeGuess) -> ExtractedTime:
    hour = guess.hour
    if not isinstance(hour, int) or not 0 <= hour <= 23:
        hour = DEFAULT_HOUR
    minute = guess.minute
    if not isinstance(minute, int) or not 0 <= minute <= 59:
        minute = DEFAULT_MINUTE
    return ExtractedTime(hour=hour, minute=minute, explicit=guess.explicit, literals=guess.literals)


def extract_time(
    text: str,
    base: datetime | None = None,
    *,
    rules: Sequence[TimeRule] = DEFAULT_RULES,
) -> ExtractedTime:
    raw = text or ""
    guess = reduce(lambda current, rule: rule(raw, current), rules, TimeGuess(base=base))
    return validate_time(guess)
