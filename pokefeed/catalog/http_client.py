from __future__ import annotations

import logging
import time
from typing import Any

import httpx
from tenacity import AsyncRetrying, retry_if_exception_type, stop_after_attempt, wait_exponential_jitter

from pokefeed.catalog.errors import (
    CatalogError,
    ERROR_HTTP,
    ERROR_NOT_FOUND,
    ERROR_PARSE_FAIL,
    ERROR_TIMEOUT,
    ERROR_UNKNOWN,
)
from pokefeed.catalog.parser import parse_detail, parse_listing
from pokefeed.catalog.types import Detail, Entity
from pokefeed.result import Result
from pokefeed.utils import truncate


logger = logging.getLogger(__name__)


def _redact_detail(detail: str) -> str:
    return truncate(detail.strip(), 240)


class PokeApiClient:
    """Remote catalog backed by a PokeAPI-compatible HTTP endpoint.

    Both public calls return a `Result` instead of raising, so the feed
    controller can treat failures as opaque values.
    """

    def __init__(
        self,
        base_url: str,
        page_size: int,
        timeout_seconds: int,
        max_attempts: int,
        user_agent: str,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._page_size = page_size
        self._max_attempts = max(1, max_attempts)

        self._client = httpx.AsyncClient(
            base_url=base_url,
            follow_redirects=True,
            timeout=httpx.Timeout(timeout_seconds),
            headers={
                "User-Agent": user_agent,
                "Accept": "application/json",
            },
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _get(self, url: str, params: dict[str, Any] | None = None) -> httpx.Response:
        retrying = AsyncRetrying(
            retry=retry_if_exception_type(httpx.TransportError),
            stop=stop_after_attempt(self._max_attempts),
            wait=wait_exponential_jitter(initial=1, max=10),
            reraise=True,
        )
        return await retrying(self._client.get, url, params=params)

    async def _get_json(self, url: str, params: dict[str, Any] | None = None) -> Any:
        try:
            resp = await self._get(url, params)
        except httpx.TimeoutException as e:
            raise CatalogError(ERROR_TIMEOUT, _redact_detail(str(e))) from e
        except httpx.TransportError as e:
            raise CatalogError(ERROR_HTTP, _redact_detail(str(e))) from e
        except Exception as e:  # pragma: no cover
            raise CatalogError(ERROR_UNKNOWN, _redact_detail(str(e))) from e

        if resp.status_code == 404:
            raise CatalogError(ERROR_NOT_FOUND, f"{url} not found")
        if resp.status_code == 429:
            raise CatalogError(ERROR_HTTP, "429 too many requests")
        if resp.status_code >= 500:
            raise CatalogError(ERROR_HTTP, f"{resp.status_code} server error")
        if resp.status_code >= 400:
            raise CatalogError(ERROR_HTTP, f"{resp.status_code} client error")

        try:
            return resp.json()
        except ValueError as e:
            raise CatalogError(ERROR_PARSE_FAIL, "response is not json") from e

    async def list_page(self, page: int) -> Result[list[Entity]]:
        if page < 1:
            return Result.failure(ValueError(f"page must be >= 1, got {page}"))

        started = time.perf_counter()
        params = {"offset": (page - 1) * self._page_size, "limit": self._page_size}
        try:
            payload = await self._get_json("pokemon", params)
            entities = parse_listing(payload)
        except CatalogError as e:
            logger.warning("list page=%s failed: %s", page, e)
            return Result.failure(e)

        duration_ms = int((time.perf_counter() - started) * 1000)
        logger.debug("list page=%s items=%s duration_ms=%s", page, len(entities), duration_ms)
        return Result.success(entities)

    async def fetch_detail(self, entity: Entity) -> Result[Detail]:
        try:
            payload = await self._get_json(f"pokemon/{entity.id}")
            return Result.success(parse_detail(payload))
        except CatalogError as e:
            logger.debug("detail id=%s failed: %s", entity.id, e)
            return Result.failure(e)
