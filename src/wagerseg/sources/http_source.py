"""Fetch per-player aggregates from a remote HTTP service."""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import ValidationError

from wagerseg.errors import SourceUnavailable
from wagerseg.models import PlayerAggregate, QueryWindow


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class HttpAggregateSource:
    """Aggregate source that queries ``GET {base_url}/aggregates``.

    The service answers with a JSON list of records (or ``{"aggregates": [...]}``)
    using either camelCase or snake_case keys.
    """

    def __init__(
        self,
        base_url: str,
        *,
        auth_token: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.auth_token = auth_token
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        if not self.auth_token:
            return {}
        return {"Authorization": f"Bearer {self.auth_token}"}

    async def fetch(self, window: QueryWindow) -> list[PlayerAggregate]:
        params = {"timeFrom": window.time_from, "timeTo": window.time_to}
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.get("/aggregates", params=params, headers=self._headers())
                resp.raise_for_status()
                payload = resp.json()
        except httpx.HTTPStatusError as exc:
            raise SourceUnavailable(
                f"Aggregate service returned {exc.response.status_code}", window
            ) from exc
        except (httpx.HTTPError, ValueError) as exc:
            raise SourceUnavailable(f"Aggregate service request failed: {exc}", window) from exc

        records = _extract_records(payload, window)
        try:
            aggregates = [PlayerAggregate.model_validate(record) for record in records]
        except ValidationError as exc:
            raise SourceUnavailable(f"Aggregate service sent malformed records: {exc}", window) from exc
        logger.debug("Fetched %s aggregates from %s", len(aggregates), self.base_url)
        return aggregates


def _extract_records(payload: Any, window: QueryWindow) -> list[Any]:
    if isinstance(payload, dict):
        payload = payload.get("aggregates", payload.get("data"))
    if not isinstance(payload, list):
        raise SourceUnavailable("Aggregate service response is not a list of records", window)
    return payload
