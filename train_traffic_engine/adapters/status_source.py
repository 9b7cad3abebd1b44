"""HTTP adapter for the external line-status feed."""

from __future__ import annotations

from typing import Optional

import httpx

from train_traffic_engine.core.exceptions import FetchError
from train_traffic_engine.core.logging import get_logger
from train_traffic_engine.core.models import StatusRecord

logger = get_logger(__name__)

USER_AGENT = "train-traffic-engine/0.1"


class HttpStatusSource:
    """Fetch line statuses with one GET per call; no retries."""

    def __init__(self, base_url: str, client: Optional[httpx.AsyncClient] = None) -> None:
        self._base_url = base_url
        self._client = client

    @property
    def base_url(self) -> str:
        return self._base_url

    async def fetch_statuses(self) -> list[StatusRecord]:
        if self._client is not None:
            response = await self._get(self._client)
        else:
            async with httpx.AsyncClient() as client:
                response = await self._get(client)
        return self._parse(response)

    async def _get(self, client: httpx.AsyncClient) -> httpx.Response:
        try:
            response = await client.get(
                self._base_url,
                headers={"Accept": "application/json", "User-Agent": USER_AGENT},
            )
        except httpx.HTTPError as exc:
            logger.error("Status feed request failed: %s", exc)
            raise FetchError(f"status feed request failed: {exc}") from exc
        if response.status_code >= 400:
            logger.error("Status feed returned %s: %s", response.status_code, response.text)
            raise FetchError(f"status feed returned HTTP {response.status_code}")
        return response

    def _parse(self, response: httpx.Response) -> list[StatusRecord]:
        try:
            data = response.json()
        except ValueError as exc:
            raise FetchError("status feed returned a non-JSON body") from exc
        if not isinstance(data, list):
            raise FetchError("status feed did not return a JSON array")
        try:
            records = [StatusRecord.from_data(item) for item in data]
        except ValueError as exc:
            raise FetchError(f"status feed returned a malformed record: {exc}") from exc
        logger.info("Fetched %d line status records", len(records))
        return records


__all__ = ["HttpStatusSource", "USER_AGENT"]
