from __future__ import annotations

import logging
import sys
import time
from datetime import datetime, timezone

from telegram.ext import Application, CommandHandler, MessageHandler, filters

from tucalendario.bot import handlers
from tucalendario.core.reminder_service import ReminderService
from tucalendario.infra.calendar_backend import get_backend
from tucalendario.infra.config import Settings, load_settings, resolve_env_label
from tucalendario.infra.http_server import start_http_server
from tucalendario.infra.keepalive import KeepAliveScheduler
from tucalendario.infra.logging_config import configure_logging
from tucalendario.infra.request_context import RequestContext, log_event
from tucalendario.infra.version import resolve_app_version
from tucalendario.infra.wit_client import WitClient

LOGGER = logging.getLogger(__name__)


def _register_handlers(application: Application) -> None:
    application.add_handler(CommandHandler("start", handlers.start))
    application.add_handler(CommandHandler("help", handlers.help_command))
    application.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handlers.chat))
    application.add_error_handler(handlers.error_handler)


def build_application(settings: Settings) -> Application:
    application = Application.builder().token(settings.bot_token).build()
    nlu_client = WitClient(
        token=settings.wit_token,
        api_version=settings.wit_api_version,
        timeout_seconds=settings.wit_timeout_seconds,
    )
    application.bot_data["settings"] = settings
    application.bot_data["reminder_service"] = ReminderService(
        nlu_client=nlu_client,
        calendar_backend=get_backend(settings),
        tz=settings.tz,
    )
    application.bot_data["http_state"] = {
        "start_time": time.monotonic(),
        "version": resolve_app_version(),
    }

    async def _post_init(app: Application) -> None:
        runner, _site = await start_http_server(settings.http_host, settings.http_port, app.bot_data["http_state"])
        app.bot_data["http_runner"] = runner
        LOGGER.info("HTTP server listening on %s:%s", settings.http_host, settings.http_port)
        if settings.public_url:
            keepalive = KeepAliveScheduler(
                settings.public_url,
                interval_minutes=settings.keepalive_interval_minutes,
            )
            keepalive.start()
            app.bot_data["keepalive"] = keepalive
        else:
            LOGGER.info("PUBLIC_URL not set; keep-alive disabled")

    async def _post_shutdown(app: Application) -> None:
        keepalive = app.bot_data.pop("keepalive", None)
        if keepalive is not None:
            keepalive.shutdown()
        runner = app.bot_data.pop("http_runner", None)
        if runner is not None:
            await runner.cleanup()

    application.post_init = _post_init
    application.post_shutdown = _post_shutdown
    _register_handlers(application)
    return application


def main() -> None:
    configure_logging()
    try:
        settings = load_settings()
    except RuntimeError as exc:
        LOGGER.exception("Startup failed: %s", exc)
        raise SystemExit(str(exc)) from exc

    application = build_application(settings)
    startup_context = RequestContext(
        correlation_id="startup",
        user_id=0,
        chat_id=0,
        message_id=0,
        ts=datetime.now(timezone.utc),
        env=resolve_env_label(),
    )
    log_event(
        LOGGER,
        startup_context,
        component="startup",
        event="startup.check",
        python_version=sys.version.split()[0],
        app_version=application.bot_data["http_state"]["version"],
        timezone=settings.timezone,
        calendar_id=settings.google_calendar_id,
        owner_configured=settings.owner_email is not None,
        dry_run=settings.dry_run,
    )
    LOGGER.info("🤖 Bot en marcha...")
    application.run_polling()


if __name__ == "__main__":
    main()
