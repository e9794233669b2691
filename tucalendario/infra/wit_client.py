from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol

import httpx

from tucalendario.core.models import DatetimeEntity, NluResult

LOGGER = logging.getLogger(__name__)

DATETIME_ENTITY_KEY = "wit$datetime:datetime"
NO_INTENT = "none"


@dataclass(frozen=True)
class WitAPIError(RuntimeError):
    status_code: int
    message: str

    def __str__(self) -> str:
        return self.message


class NluClient(Protocol):
    async def parse_message(self, text: str) -> NluResult:
        ...


class WitClient:
    def __init__(
        self,
        *,
        token: str,
        base_url: str = "https://api.wit.ai",
        api_version: str = "20230514",
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.token = token
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    async def parse_message(self, text: str) -> NluResult:
        url = f"{self.base_url}/message"
        params = {"v": self.api_version, "q": text}
        headers = {"Authorization": f"Bearer {self.token}"}
        async with httpx.AsyncClient(timeout=self.timeout_seconds, transport=self._transport) as client:
            try:
                response = await client.get(url, params=params, headers=headers)
            except httpx.RequestError as exc:
                raise RuntimeError(f"Wit.ai request failed: {exc}") from exc

        if response.status_code // 100 != 2:
            body = response.text
            trimmed = body[:500] + ("..." if len(body) > 500 else "")
            raise WitAPIError(
                status_code=response.status_code,
                message=f"Wit.ai API error {response.status_code}: {trimmed}",
            )

        result = parse_wit_response(response.json())
        LOGGER.info(
            "Wit.ai parsed: intent=%s datetime=%s",
            result.intent_name,
            result.datetime_entity.iso_value if result.datetime_entity else "-",
        )
        return result


def parse_wit_response(data: dict[str, Any]) -> NluResult:
    intents = data.get("intents") or []
    intent_name = NO_INTENT
    if intents and isinstance(intents[0], dict):
        intent_name = intents[0].get("name") or NO_INTENT
    entities = data.get("entities") or {}
    candidates = entities.get(DATETIME_ENTITY_KEY) or []
    entity = None
    if candidates and isinstance(candidates[0], dict):
        entity = _parse_datetime_entity(candidates[0])
    return NluResult(intent_name=intent_name, datetime_entity=entity)


def _parse_datetime_entity(raw: dict[str, Any]) -> DatetimeEntity | None:
    value = raw.get("value")
    if not value:
        # Interval values ("el viernes a la tarde") carry from/to instead of value.
        start = raw.get("from")
        if isinstance(start, dict):
            value = start.get("value")
    if not isinstance(value, str) or not value:
        return None
    body = raw.get("body")
    return DatetimeEntity(iso_value=value, matched_substring=body if isinstance(body, str) else None)
