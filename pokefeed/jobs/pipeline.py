from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from pokefeed.catalog.http_client import PokeApiClient
from pokefeed.config import Config
from pokefeed.feed.controller import FeedController
from pokefeed.feed.items import entities_of
from pokefeed.metrics.metrics import Metrics, RuntimeStats, write_status_json
from pokefeed.storage.db import SessionStore


logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    config: Config
    client: PokeApiClient
    store: SessionStore
    metrics: Metrics
    runtime_stats: RuntimeStats


async def build_app_context(config: Config) -> AppContext:
    store = SessionStore(config.sqlite_path)
    await store.connect()

    metrics = Metrics()
    if config.metrics_enabled:
        metrics.start_server(config.metrics_bind, config.metrics_port)

    client = PokeApiClient(
        base_url=config.api_base_url,
        page_size=config.page_size,
        timeout_seconds=config.http_timeout_seconds,
        max_attempts=config.http_max_attempts,
        user_agent=config.user_agent,
    )

    return AppContext(
        config=config,
        client=client,
        store=store,
        metrics=metrics,
        runtime_stats=RuntimeStats(session_id=config.session_id),
    )


async def close_app_context(ctx: AppContext) -> None:
    await ctx.client.aclose()
    await ctx.store.close()


async def open_session(ctx: AppContext, session_id: str, reset: bool = False) -> FeedController:
    """Restore the session's feed, or start a fresh one with the first page."""

    if reset:
        await ctx.store.delete_snapshot(session_id)

    snapshot = await ctx.store.load_snapshot(session_id)
    if snapshot is None:
        controller = FeedController(ctx.client, metrics=ctx.metrics)
    else:
        logger.info("session=%s restored next_page=%s", session_id, snapshot.next_page_to_load)
        controller = FeedController.restore(ctx.client, snapshot, metrics=ctx.metrics)

    await controller.start()
    return controller


async def run_commands(
    controller: FeedController,
    pages: int = 0,
    refresh: bool = False,
    retry: bool = False,
) -> None:
    if retry:
        # Guard flags are not persisted, so a restored session never shows its
        # error row; the cursor page is the one that failed.
        await controller.retry()
    if refresh:
        await controller.refresh()
    for _ in range(max(0, pages)):
        if controller.session.has_unresolved_error:
            break
        await controller.load_next()


async def persist_session(ctx: AppContext, session_id: str, controller: FeedController) -> None:
    await ctx.store.save_snapshot(session_id, controller.snapshot())


def write_status(ctx: AppContext, controller: FeedController) -> None:
    stats = ctx.runtime_stats
    state = controller.feed.value
    stats.next_page_to_load = controller.session.next_page_to_load
    stats.has_unresolved_error = controller.session.has_unresolved_error
    stats.feed_failed = state is not None and state.is_failure
    stats.rows = len(entities_of(state.value or [])) if state is not None and state.is_success else 0
    stats.updated_ts = time.time()

    data = {
        "session_id": stats.session_id,
        "next_page_to_load": stats.next_page_to_load,
        "has_unresolved_error": stats.has_unresolved_error,
        "feed_failed": stats.feed_failed,
        "rows": stats.rows,
        "pages_loaded": ctx.metrics.sample("feed_page_loads_total"),
        "detail_failures": ctx.metrics.sample("feed_detail_failures_total"),
        "updated_ts": stats.updated_ts,
    }
    write_status_json(ctx.config.status_json_path, data)
