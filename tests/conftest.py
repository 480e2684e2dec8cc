"""
Shared fixtures for pokefeed tests.

Provides:
- A scripted in-memory catalog whose calls are AsyncMock spies
- Entity / Detail factories
- A per-test metrics registry
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from pokefeed.catalog.errors import CatalogError, ERROR_HTTP
from pokefeed.catalog.types import Detail, Entity
from pokefeed.metrics.metrics import Metrics
from pokefeed.result import Result


def make_entity(entity_id: str, name: str | None = None) -> Entity:
    return Entity(id=entity_id, name=name or f"mon-{entity_id}")


def make_detail(entity_id: str) -> Detail:
    return Detail(
        image_ref=f"https://img.test/{entity_id}.png",
        move=f"move-{entity_id}",
        weight=int(entity_id) * 10,
    )


async def settle(rounds: int = 20) -> None:
    """Let pending tasks run up to their next real suspension point."""
    for _ in range(rounds):
        await asyncio.sleep(0)


class ScriptedCatalog:
    """
    In-memory remote catalog.

    Pages and details are scripted per test; unscripted pages and details
    fail. `list_page` and `fetch_detail` are AsyncMock spies so tests can
    count calls.
    """

    def __init__(self):
        self.pages: dict[int, Result] = {}
        self.details: dict[str, Result] = {}
        self.delays: dict[str, float] = {}
        self.gates: dict[int, asyncio.Event] = {}
        self.list_page = AsyncMock(side_effect=self._list_page)
        self.fetch_detail = AsyncMock(side_effect=self._fetch_detail)

    def add_page(self, page: int, ids: list[str], failing_details: tuple[str, ...] = ()) -> list[Entity]:
        entities = [make_entity(i) for i in ids]
        self.pages[page] = Result.success(entities)
        for entity_id in ids:
            if entity_id in failing_details:
                self.details[entity_id] = Result.failure(CatalogError(ERROR_HTTP, f"no detail {entity_id}"))
            else:
                self.details[entity_id] = Result.success(make_detail(entity_id))
        return entities

    def fail_page(self, page: int) -> None:
        self.pages[page] = Result.failure(CatalogError(ERROR_HTTP, f"503 on page {page}"))

    def hold_page(self, page: int) -> asyncio.Event:
        gate = asyncio.Event()
        self.gates[page] = gate
        return gate

    def listed_pages(self) -> list[int]:
        return [call.args[0] for call in self.list_page.await_args_list]

    async def _list_page(self, page: int) -> Result:
        gate = self.gates.get(page)
        if gate is not None:
            await gate.wait()
        outcome = self.pages.get(page)
        if outcome is None:
            return Result.failure(CatalogError(ERROR_HTTP, f"no page {page}"))
        return outcome

    async def _fetch_detail(self, entity: Entity) -> Result:
        delay = self.delays.get(entity.id)
        if delay:
            await asyncio.sleep(delay)
        outcome = self.details.get(entity.id)
        if outcome is None:
            return Result.failure(CatalogError(ERROR_HTTP, f"no detail {entity.id}"))
        return outcome


@pytest.fixture
def catalog():
    """Empty scripted catalog."""
    return ScriptedCatalog()


@pytest.fixture
def metrics():
    """Metrics bound to a fresh registry."""
    return Metrics()
