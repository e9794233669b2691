from __future__ import annotations

import re
from collections.abc import Iterable

FALLBACK_TITLE = "Recordatorio"

# Applied in order, each one anchored at the start of what is left. Every
# pattern is tried even when an earlier one already stripped something.
FILLER_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(?:hola|buenas|buen\s+d[ií]a)[,!.]?\s+", re.IGNORECASE),
    re.compile(r"^por\s+favor[,]?\s*", re.IGNORECASE),
    re.compile(r"^(?:me\s+)?(?:pod[eé]s|podr[ií]as|puedes)\s+", re.IGNORECASE),
    re.compile(r"^no\s+me\s+(?:dejes\s+)?olvid(?:e|es|ar)\s+(?:de\s+)?", re.IGNORECASE),
    re.compile(
        r"^(?:recordarme|record[aá]me|recu[eé]rdame|acordarme|haceme\s+acordar|hazme\s+acordar"
        r"|recordatorio|agendar|agend[aá]me|anotar|anot[aá]me)\b\s*(?:(?:de|para|que|a)\s+)?",
        re.IGNORECASE,
    ),
    re.compile(r"^que\s+(?:tengo|debo|hay|necesito)\s+(?:que\s+)?", re.IGNORECASE),
    re.compile(r"^(?:tengo|debo|necesito)\s+que\s+", re.IGNORECASE),
)
_CONNECTORS_RE = re.compile(
    r"\b(?:a\s+las|el\s+d[ií]a|este|esta|pr[óo]xim[oa])\b",
    re.IGNORECASE,
)
_WHITESPACE_RE = re.compile(r"\s+")


def strip_fillers(text: str) -> str:
    for pattern in FILLER_PATTERNS:
        text = pattern.sub("", text.lstrip(), count=1)
    return text


def capitalize_first(text: str) -> str:
    if not text:
        return text
    return text[0].upper() + text[1:]


def clean_title(
    text: str,
    *,
    nlu_substring: str | None = None,
    clock_literals: Iterable[str] = (),
    weekday_literal: str | None = None,
) -> str:
    title = text or ""
    if nlu_substring:
        title = title.replace(nlu_substring, " ", 1)
    title = strip_fillers(title)
    for literal in sorted(clock_literals, key=len, reverse=True):
        if literal:
            title = title.replace(literal, " ")
    if weekday_literal:
        title = re.sub(rf"(?:\bel\s+)?{re.escape(weekday_literal)}", " ", title, flags=re.IGNORECASE)
    title = _CONNECTORS_RE.sub(" ", title)
    title = _WHITESPACE_RE.sub(" ", title).strip()
    if not title:
        return FALLBACK_TITLE
    return capitalize_first(title)
