from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

LOGGER = logging.getLogger(__name__)

DEFAULT_CREDENTIALS_FILE = Path("credenciales.json")
DEFAULT_TIMEZONE = "America/Argentina/Buenos_Aires"
DEFAULT_PORT = 3000
DEFAULT_KEEPALIVE_MINUTES = 14


@dataclass(frozen=True)
class Settings:
    bot_token: str
    wit_token: str
    wit_api_version: str
    wit_timeout_seconds: float
    google_credentials: dict[str, Any] | None
    google_calendar_id: str
    timezone: str
    owner_email: str | None
    public_url: str | None
    keepalive_interval_minutes: int
    http_host: str
    http_port: int
    dry_run: bool

    @property
    def tz(self) -> ZoneInfo:
        return ZoneInfo(self.timezone)


_DEV_ENVS = {"dev", "development", "local"}


def resolve_env_label(raw_env: dict[str, str] | None = None) -> str:
    source = raw_env if raw_env is not None else os.environ
    env = source.get("APP_ENV", "prod").strip().lower()
    return "dev" if env in _DEV_ENVS else "prod"


def load_settings(env: dict[str, str] | None = None) -> Settings:
    if env is None:
        load_dotenv()
        env = dict(os.environ)
    dry_run = _parse_optional_bool(env.get("DRY_RUN")) is True

    token = env.get("TELEGRAM_BOT_TOKEN")
    if not token:
        if dry_run:
            # Placeholder so the Telegram builder accepts it in smoke runs.
            token = "000000:DRY_RUN_TOKEN"
        else:
            raise RuntimeError("TELEGRAM_BOT_TOKEN is not set")

    wit_token = env.get("WIT_AI_TOKEN") or ""
    if not wit_token and not dry_run:
        raise RuntimeError("WIT_AI_TOKEN is not set")
    wit_api_version = env.get("WIT_API_VERSION", "20230514").strip() or "20230514"
    wit_timeout_seconds = _parse_optional_float(env.get("WIT_TIMEOUT_SECONDS"), 10.0)

    google_credentials = _load_google_credentials(env)
    if google_credentials is None and not dry_run:
        raise RuntimeError("Google credentials not found: set GOOGLE_CREDENTIALS or GOOGLE_CREDENTIALS_FILE")
    google_calendar_id = env.get("GOOGLE_CALENDAR_ID", "primary").strip() or "primary"

    timezone = env.get("DEFAULT_TIMEZONE", DEFAULT_TIMEZONE).strip() or DEFAULT_TIMEZONE
    try:
        ZoneInfo(timezone)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise RuntimeError(f"DEFAULT_TIMEZONE is invalid: {timezone}") from exc

    owner_email = env.get("USER_EMAIL") or None
    public_url = env.get("PUBLIC_URL") or env.get("RENDER_EXTERNAL_URL") or None
    keepalive_interval_minutes = _parse_int_with_default(
        env.get("KEEPALIVE_INTERVAL_MINUTES"),
        DEFAULT_KEEPALIVE_MINUTES,
    )
    if keepalive_interval_minutes <= 0:
        raise RuntimeError("KEEPALIVE_INTERVAL_MINUTES must be positive")
    http_host = env.get("HTTP_HOST", "0.0.0.0").strip() or "0.0.0.0"
    http_port = _parse_int_with_default(env.get("PORT"), DEFAULT_PORT)
    if http_port <= 0 or http_port > 65535:
        raise RuntimeError(f"PORT is out of range: {http_port}")

    return Settings(
        bot_token=token,
        wit_token=wit_token,
        wit_api_version=wit_api_version,
        wit_timeout_seconds=wit_timeout_seconds,
        google_credentials=google_credentials,
        google_calendar_id=google_calendar_id,
        timezone=timezone,
        owner_email=owner_email,
        public_url=public_url,
        keepalive_interval_minutes=keepalive_interval_minutes,
        http_host=http_host,
        http_port=http_port,
        dry_run=dry_run,
    )


def _load_google_credentials(env: dict[str, str]) -> dict[str, Any] | None:
    inline = env.get("GOOGLE_CREDENTIALS")
    if inline and inline.strip():
        try:
            return json.loads(inline)
        except json.JSONDecodeError as exc:
            raise RuntimeError("GOOGLE_CREDENTIALS is not valid JSON") from exc
    path = Path(env.get("GOOGLE_CREDENTIALS_FILE") or DEFAULT_CREDENTIALS_FILE)
    if not path.exists():
        return None
    with path.open("r", encoding="utf-8") as credentials_file:
        try:
            return json.load(credentials_file)
        except json.JSONDecodeError as exc:
            raise RuntimeError(f"Credentials file is not valid JSON: {path}") from exc


def _parse_optional_float(value: str | None, default: float) -> float:
    if value is None:
        return default
    trimmed = value.strip()
    if not trimmed:
        return default
    try:
        return float(trimmed)
    except ValueError as exc:
        raise RuntimeError(f"Expected a number, got {trimmed!r}") from exc


def _parse_optional_bool(value: str | None) -> bool | None:
    if value is None:
        return None
    trimmed = value.strip().lower()
    if not trimmed:
        return None
    return trimmed in {"1", "true", "yes", "on"}


def _parse_int_with_default(value: str | None, default: int) -> int:
    if value is None:
        return default
    trimmed = value.strip()
    if not trimmed:
        return default
    try:
        return int(trimmed)
    except ValueError as exc:
        raise RuntimeError(f"Expected an integer, got {trimmed!r}") from exc
