"""Reply delivery for chat handlers.

Bot replies are a few lines long, so the usual path is a single ``reply_text``.
Anything longer is split on line boundaries under Telegram's text limit.
"""

from __future__ import annotations

import logging

from telegram import LinkPreviewOptions, Update
from telegram.constants import MessageLimit
from telegram.error import BadRequest
from telegram.ext import ContextTypes

from tucalendario.infra.request_context import add_response_size

LOGGER = logging.getLogger(__name__)

EMPTY_REPLY = "(respuesta vacía)"
_NO_PREVIEW = LinkPreviewOptions(is_disabled=True)


def split_reply(text: str, limit: int = MessageLimit.MAX_TEXT_LENGTH) -> list[str]:
    parts: list[str] = []
    current = ""
    for line in (text or "").splitlines(keepends=True):
        while len(line) > limit:
            if current:
                parts.append(current)
                current = ""
            parts.append(line[:limit])
            line = line[limit:]
        if len(current) + len(line) > limit:
            parts.append(current)
            current = ""
        current += line
    if current:
        parts.append(current)
    return [part.rstrip("\n") for part in parts if part.strip()]


async def safe_send_text(
    update: Update | None,
    context: ContextTypes.DEFAULT_TYPE | None,
    text: str | None,
) -> int:
    """Reply to the update's message; returns the number of characters sent."""
    message = update.effective_message if update else None
    if message is None:
        LOGGER.warning("No message to reply to; dropping reply chars=%d", len(text or ""))
        return 0
    payload = text if text and text.strip() else EMPTY_REPLY
    for part in split_reply(payload):
        try:
            await message.reply_text(part, link_preview_options=_NO_PREVIEW)
        except BadRequest:
            LOGGER.exception("Telegram rejected reply: chars=%d", len(part))
            break
    add_response_size(context, len(payload))
    return len(payload)
