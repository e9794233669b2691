"""
Liveness HTTP server: a static "alive" page on / and a JSON /healthz.
Hosting platforms probe it to decide whether the process is up. No secrets in responses.
"""

from __future__ import annotations

import time
from typing import Any

from aiohttp import web

AppState = dict[str, Any]

ALIVE_PAGE = (
    "<h1>TuCalendarioBot está activo</h1>"
    "<p>El bot de Telegram está funcionando correctamente.</p>"
)


async def index(request: web.Request) -> web.Response:
    return web.Response(text=ALIVE_PAGE, content_type="text/html")


async def healthz(request: web.Request) -> web.Response:
    state: AppState = request.app["state"]
    uptime = time.monotonic() - state.get("start_time", time.monotonic())
    body = {
        "status": "ok",
        "version": state.get("version", "unknown"),
        "uptime_seconds": round(uptime, 2),
    }
    return web.json_response(body)


def create_app(state: AppState) -> web.Application:
    app = web.Application()
    app["state"] = state
    app.router.add_get("/", index)
    app.router.add_get("/healthz", healthz)
    return app


async def start_http_server(
    host: str,
    port: int,
    state: AppState,
) -> tuple[web.AppRunner, web.TCPSite]:
    """Create runner and start site. Caller must call runner.cleanup() on shutdown."""
    runner = web.AppRunner(create_app(state))
    await runner.setup()
    site = web.TCPSite(runner, host, port)
    await site.start()
    return runner, site
