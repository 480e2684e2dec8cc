from __future__ import annotations

import asyncio
import logging

from pokefeed.catalog.types import Entity
from pokefeed.metrics.metrics import Metrics
from pokefeed.result import Result


logger = logging.getLogger(__name__)


async def _list_page(client, page: int) -> Result[list[Entity]]:
    try:
        return await client.list_page(page)
    except Exception as e:
        return Result.failure(e)


async def load_page_with_details(client, page: int, metrics: Metrics | None = None) -> Result[list[Entity]]:
    """Fetch one page and enrich every entity with its detail.

    One detail task per entity, all joined before returning. A failed detail
    leaves that entity with detail=None; only a failed listing fails the page.
    Entities come back in listing order.
    """

    listing = await _list_page(client, page)
    if listing.is_failure:
        return Result.failure(listing.error)

    entities = list(listing.value or [])
    outcomes = await asyncio.gather(
        *(client.fetch_detail(entity) for entity in entities),
        return_exceptions=True,
    )

    enriched: list[Entity] = []
    missing = 0
    for entity, outcome in zip(entities, outcomes):
        if isinstance(outcome, BaseException):
            outcome = Result.failure(outcome)
        if outcome.is_failure:
            missing += 1
            logger.debug("detail missing page=%s id=%s err=%s", page, entity.id, outcome.error)
        enriched.append(entity.with_detail(outcome.get_or_none()))

    if missing and metrics is not None:
        metrics.detail_failures_total.inc(missing)
    return Result.success(enriched)
