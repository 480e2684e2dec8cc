from __future__ import annotations

import asyncio
import logging
import time

from pokefeed.feed.enrichment import load_page_with_details
from pokefeed.feed.items import (
    ERROR_MARKER,
    LOADING_MARKER,
    FeedItem,
    append_page,
    data_row,
    entities_of,
    has_data_rows,
    trailing_marker,
    with_marker,
)
from pokefeed.feed.observable import ObservableValue, OneShotEvent, RetrySignal
from pokefeed.feed.session import SessionSnapshot, SessionState
from pokefeed.metrics.metrics import Metrics
from pokefeed.result import Result


logger = logging.getLogger(__name__)


FeedState = Result[list[FeedItem]]


class FeedController:
    """Owns the paginated feed and the session cursor.

    `feed` publishes a FeedState after every change. `refresh_failed` fires
    once per failed refresh of a populated feed. Commands are expected from a
    single control sequence; `is_fetching_next_page` and
    `has_unresolved_error` are the only guards.
    """

    def __init__(
        self,
        client,
        session: SessionState | None = None,
        metrics: Metrics | None = None,
        initial_feed: FeedState | None = None,
    ) -> None:
        self._client = client
        self._metrics = metrics if metrics is not None else Metrics()
        self.session = session if session is not None else SessionState()

        self.feed: ObservableValue[FeedState] = ObservableValue(initial_feed)
        self.refresh_failed = OneShotEvent()

    @classmethod
    def restore(cls, client, snapshot: SessionSnapshot, metrics: Metrics | None = None) -> FeedController:
        feed: FeedState | None = None
        if snapshot.entities is not None:
            feed = Result.success([data_row(e) for e in snapshot.entities])
        session = SessionState(next_page_to_load=snapshot.next_page_to_load)
        return cls(client, session=session, metrics=metrics, initial_feed=feed)

    def snapshot(self) -> SessionSnapshot:
        state = self.feed.value
        entities = None
        if state is not None and state.is_success:
            entities = tuple(entities_of(state.value or []))
        return SessionSnapshot(next_page_to_load=self.session.next_page_to_load, entities=entities)

    def _current_items(self) -> list[FeedItem]:
        state = self.feed.value
        if state is None or state.is_failure:
            return []
        return list(state.value or [])

    def _publish(self, state: FeedState) -> None:
        self.feed.set(state)

    async def start(self) -> None:
        if self.feed.value is None:
            await self.load_next()

    async def load_next(self) -> None:
        state = self.session
        if state.has_unresolved_error:
            self._metrics.load_next_skipped_total.labels(reason="unresolved_error").inc()
            logger.debug("load_next skipped: unresolved error on page=%s", state.next_page_to_load)
            return
        if state.is_fetching_next_page:
            self._metrics.load_next_skipped_total.labels(reason="in_flight").inc()
            logger.debug("load_next skipped: page=%s already in flight", state.next_page_to_load)
            return

        current = self._current_items()
        page = state.next_page_to_load
        state.is_fetching_next_page = True
        try:
            if current and trailing_marker(current) is None:
                self._publish(Result.success(with_marker(current, LOADING_MARKER)))

            started = time.perf_counter()
            result = await load_page_with_details(self._client, page, metrics=self._metrics)
            self._metrics.page_load_seconds.observe(time.perf_counter() - started)

            if result.is_success:
                entities = result.value or []
                self._publish(Result.success(append_page(current, entities)))
                state.next_page_to_load = page + 1
                state.has_unresolved_error = False
                self._metrics.page_loads_total.inc()
                logger.info("page=%s merged items=%s", page, len(entities))
            elif has_data_rows(current):
                self._publish(Result.success(with_marker(current, ERROR_MARKER)))
                state.has_unresolved_error = True
                self._metrics.page_failures_total.inc()
                logger.warning("page=%s failed, error row shown: %s", page, result.error)
            else:
                self._publish(Result.failure(result.error))
                self._metrics.page_failures_total.inc()
                logger.warning("page=%s failed with no data to show: %s", page, result.error)
        finally:
            state.is_fetching_next_page = False

    async def refresh(self) -> None:
        """Reload the page the cursor points at and show only that page.

        The cursor is not advanced.
        """

        current = self._current_items()
        page = self.session.next_page_to_load
        result = await load_page_with_details(self._client, page, metrics=self._metrics)

        if result.is_success:
            self._publish(Result.success(append_page([], result.value or [])))
            self.session.has_unresolved_error = False
            logger.info("refresh page=%s items=%s", page, len(result.value or []))
            return

        self._metrics.refresh_failures_total.inc()
        if has_data_rows(current):
            logger.warning("refresh page=%s failed, keeping feed: %s", page, result.error)
            self.refresh_failed.emit()
        else:
            logger.warning("refresh page=%s failed with no data to show: %s", page, result.error)
            self._publish(Result.failure(result.error))

    async def retry(self) -> None:
        # The unresolved-error flag is otherwise only cleared by a successful load.
        self.session.has_unresolved_error = False
        await self.load_next()

    def listen_for_retries(self, signal: RetrySignal) -> asyncio.Task:
        async def retry_loop() -> None:
            while True:
                await signal.wait()
                try:
                    await self.retry()
                except Exception:
                    logger.exception("retry failed")

        return asyncio.create_task(retry_loop(), name="feed_retry_listener")
