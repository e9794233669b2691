from __future__ import annotations

import hashlib
import json
import logging
import os
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from telegram import Update
from telegram.ext import ContextTypes

_CONTEXT_KEY = "_request_context"
_DEV_ENVS = {"dev", "development", "local"}
_SECRET_KEYS = {"authorization", "api_key", "apikey", "token", "password", "secret", "private_key"}
_TEXT_KEYS = {"text", "input_text", "message", "title"}


@dataclass
class RequestContext:
    correlation_id: str
    user_id: int
    chat_id: int
    message_id: int
    ts: datetime
    env: str
    input_text: str = ""
    start_time: float = field(default_factory=time.monotonic)
    status: str = "ok"
    response_size: int = 0
    meta: dict[str, Any] = field(default_factory=dict)


def _truncate_text(text: str, limit: int = 120) -> str:
    cleaned = text.replace("\n", " ").strip()
    if len(cleaned) <= limit:
        return cleaned
    return cleaned[:limit].rstrip() + "…"


def _hash_text(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def _env_label() -> str:
    env = os.getenv("APP_ENV", "prod").strip().lower()
    return "dev" if env in _DEV_ENVS else "prod"


def start_request(update: Update | None, context: ContextTypes.DEFAULT_TYPE | None) -> RequestContext:
    user = update.effective_user if update else None
    chat = update.effective_chat if update else None
    message = update.effective_message if update else None
    message_id = getattr(message, "message_id", 0) if message else 0
    request_context = RequestContext(
        correlation_id=str(uuid.uuid4()),
        user_id=user.id if user else 0,
        chat_id=chat.id if chat else 0,
        message_id=message_id if isinstance(message_id, int) else 0,
        ts=datetime.now(timezone.utc),
        env=_env_label(),
        input_text=(getattr(message, "text", None) or "") if message else "",
    )
    if context is not None:
        context.chat_data[_CONTEXT_KEY] = request_context
    return request_context


def get_request_context(context: ContextTypes.DEFAULT_TYPE | None) -> RequestContext | None:
    if context is None:
        return None
    return context.chat_data.get(_CONTEXT_KEY)


def set_status(context: ContextTypes.DEFAULT_TYPE | None, status: str) -> None:
    request_context = get_request_context(context)
    if request_context:
        request_context.status = status


def add_response_size(context: ContextTypes.DEFAULT_TYPE | None, size: int) -> None:
    request_context = get_request_context(context)
    if request_context:
        request_context.response_size += max(size, 0)


def elapsed_ms(start_time: float) -> float:
    return max((time.monotonic() - start_time) * 1000, 0.01)


def safe_log_payload(request_context: RequestContext | None, data: Any) -> Any:
    """Mask secrets; user text is logged as length + hash (plus a preview in dev)."""
    env = request_context.env if request_context else "prod"

    def _safe_text(text: str) -> dict[str, Any]:
        payload: dict[str, Any] = {"text_len": len(text), "text_sha256": _hash_text(text)}
        if env == "dev":
            payload["text_preview"] = _truncate_text(text)
        return payload

    if isinstance(data, dict):
        sanitized: dict[str, Any] = {}
        for key, value in data.items():
            key_lower = str(key).lower()
            if key_lower in _SECRET_KEYS:
                sanitized[key] = "***"
            elif key_lower in _TEXT_KEYS and isinstance(value, str):
                sanitized[key] = _safe_text(value)
            else:
                sanitized[key] = safe_log_payload(request_context, value)
        return sanitized
    if isinstance(data, (list, tuple)):
        return [safe_log_payload(request_context, item) for item in data]
    return data


def log_event(
    logger: logging.Logger,
    request_context: RequestContext | None,
    *,
    component: str,
    event: str,
    status: str = "ok",
    duration_ms: float | None = None,
    **fields: Any,
) -> None:
    payload: dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "correlation_id": request_context.correlation_id if request_context else "-",
        "component": component,
        "event": event,
        "status": status,
        "env": request_context.env if request_context else "prod",
    }
    if duration_ms is not None:
        payload["duration_ms"] = round(duration_ms, 2)
    if fields:
        payload.update(safe_log_payload(request_context, fields))
    message = json.dumps(payload, ensure_ascii=False, default=str)
    if status == "error":
        logger.error(message)
    else:
        logger.info(message)


def log_request(logger: logging.Logger, request_context: RequestContext) -> None:
    log_event(
        logger,
        request_context,
        component="handler",
        event="request.summary",
        status=request_context.status,
        duration_ms=elapsed_ms(request_context.start_time),
        user_id=request_context.user_id,
        chat_id=request_context.chat_id,
        message_id=request_context.message_id,
        received_at=request_context.ts.isoformat(),
        input_text=request_context.input_text,
        response_size=request_context.response_size,
        **request_context.meta,
    )
