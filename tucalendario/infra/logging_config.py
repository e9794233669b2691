"""Centralized logging configuration for the bot.

configure_logging() sets root logger level and format, adds an optional
rotating file handler and quiets chatty third-party loggers.
LOG_LEVEL and LOG_FILE are read from environment.
"""

from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

_DEFAULT_LEVEL = "INFO"
_MAX_BYTES = 5 * 1024 * 1024  # 5 MB
_BACKUP_COUNT = 3
_NOISY_LOGGERS = ("httpx", "httpcore", "telegram", "telegram.ext", "googleapiclient", "apscheduler")


def _get_level() -> int:
    raw = os.environ.get("LOG_LEVEL", _DEFAULT_LEVEL).strip().upper()
    level = getattr(logging, raw, None)
    return level if isinstance(level, int) else logging.INFO


def _get_log_file() -> str | None:
    path = os.environ.get("LOG_FILE", "").strip()
    if not path:
        return None
    return path


def configure_logging(*, level: int | None = None, log_file: str | None = None) -> None:
    """Configure process-wide logging. Call once at startup.

    Args:
        level: Log level (e.g. logging.INFO). If None, taken from LOG_LEVEL env.
        log_file: If set, log to this file with rotation. If None, from LOG_FILE env.
    """
    if level is None:
        level = _get_level()
    if log_file is None:
        log_file = _get_log_file()

    formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s", datefmt="%Y-%m-%d %H:%M:%S")

    root = logging.getLogger()
    root.setLevel(level)
    for h in root.handlers[:]:
        root.removeHandler(h)

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(level)
    console.setFormatter(formatter)
    root.addHandler(console)

    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                log_file,
                maxBytes=_MAX_BYTES,
                backupCount=_BACKUP_COUNT,
                encoding="utf-8",
            )
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            root.addHandler(file_handler)
        except OSError as e:
            root.warning("Could not open log file %s: %s; logging to stderr only", log_file, e)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    # httpx logs every request URL, which includes the bot token.
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).disabled = True
        logging.getLogger(name).propagate = False
