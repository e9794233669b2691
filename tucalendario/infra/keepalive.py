"""Self-ping on an interval so idle hosting platforms don't suspend the process."""

from __future__ import annotations

import logging

import httpx
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

LOGGER = logging.getLogger(__name__)

KEEPALIVE_JOB_ID = "keepalive"


async def ping(url: str, *, timeout_seconds: float = 10.0, transport: httpx.AsyncBaseTransport | None = None) -> bool:
    try:
        async with httpx.AsyncClient(timeout=timeout_seconds, transport=transport) as client:
            response = await client.get(url)
    except httpx.HTTPError as exc:
        LOGGER.warning("Keep-alive ping failed: url=%s error=%s", url, exc)
        return False
    if response.status_code // 100 != 2:
        LOGGER.warning("Keep-alive ping got status=%s url=%s", response.status_code, url)
        return False
    LOGGER.debug("Keep-alive ping ok: url=%s", url)
    return True


class KeepAliveScheduler:
    def __init__(self, url: str, *, interval_minutes: int = 14) -> None:
        self._url = url
        self._interval_minutes = interval_minutes
        self._scheduler = AsyncIOScheduler()

    @property
    def running(self) -> bool:
        return self._scheduler.running

    def start(self) -> None:
        if self._scheduler.running:
            LOGGER.info("KeepAliveScheduler already started, skipping")
            return
        self._scheduler.add_job(
            ping,
            trigger=IntervalTrigger(minutes=self._interval_minutes),
            id=KEEPALIVE_JOB_ID,
            replace_existing=True,
            args=[self._url],
        )
        self._scheduler.start()
        LOGGER.info("Keep-alive started: url=%s every=%smin", self._url, self._interval_minutes)

    def shutdown(self, wait: bool = False) -> None:
        if not self._scheduler.running:
            return
        self._scheduler.shutdown(wait=wait)
        LOGGER.info("Keep-alive stopped")
