from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from functools import wraps

from telegram import Update
from telegram.ext import ContextTypes

from tucalendario.core import reply
from tucalendario.core.models import IncomingMessage
from tucalendario.core.reminder_service import ReminderService
from tucalendario.infra.messaging import safe_send_text
from tucalendario.infra.request_context import get_request_context, log_request, set_status, start_request

LOGGER = logging.getLogger(__name__)

DEFAULT_SENDER_NAME = "Usuario"


def _get_reminder_service(context: ContextTypes.DEFAULT_TYPE) -> ReminderService:
    return context.application.bot_data["reminder_service"]


def _with_error_handling(
    handler: Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]],
) -> Callable[[Update, ContextTypes.DEFAULT_TYPE], Awaitable[None]]:
    @wraps(handler)
    async def wrapper(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        request_context = start_request(update, context)
        LOGGER.info(
            "Route: user_id=%s handler=%s",
            request_context.user_id,
            handler.__name__,
        )
        try:
            await handler(update, context)
        except Exception as exc:
            set_status(context, "error")
            await _handle_exception(update, context, exc)
        finally:
            log_request(LOGGER, request_context)

    return wrapper


async def _handle_exception(update: Update, context: ContextTypes.DEFAULT_TYPE, error: Exception) -> None:
    try:
        await context.application.process_error(update, error)
    except Exception:
        LOGGER.exception("Failed to forward exception to error handler")


def build_incoming_message(update: Update) -> IncomingMessage | None:
    message = update.effective_message
    if message is None or not message.text:
        return None
    user = update.effective_user
    return IncomingMessage(
        raw_text=message.text,
        sender_id=user.id if user else 0,
        sender_display_name=(user.first_name if user and user.first_name else DEFAULT_SENDER_NAME),
    )


@_with_error_handling
async def start(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await safe_send_text(update, context, reply.START_REPLY)


@_with_error_handling
async def help_command(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    await safe_send_text(update, context, reply.HELP_REPLY)


@_with_error_handling
async def chat(update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
    incoming = build_incoming_message(update)
    if incoming is None:
        return
    result = await _get_reminder_service(context).handle(incoming)
    request_context = get_request_context(context)
    if request_context is not None:
        request_context.meta["outcome"] = result.outcome
        if result.outcome == "calendar_error":
            request_context.status = "error"
    await safe_send_text(update, context, result.text)


async def error_handler(update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
    set_status(context, "error")
    LOGGER.exception("Unhandled exception", exc_info=context.error)
    if isinstance(update, Update) and update.effective_message:
        await safe_send_text(update, context, reply.GENERIC_ERROR_REPLY)
