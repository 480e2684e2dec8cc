from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Sequence

from pokefeed.catalog.types import Entity


class ItemKind(str, Enum):
    DATA = "DATA"
    LOADING = "LOADING"
    ERROR = "ERROR"


@dataclass(frozen=True)
class FeedItem:
    """One rendered row. Only DATA rows carry an entity."""

    kind: ItemKind
    entity: Entity | None = None

    @property
    def is_marker(self) -> bool:
        return self.kind is not ItemKind.DATA


LOADING_MARKER = FeedItem(kind=ItemKind.LOADING)
ERROR_MARKER = FeedItem(kind=ItemKind.ERROR)


def data_row(entity: Entity) -> FeedItem:
    return FeedItem(kind=ItemKind.DATA, entity=entity)


def data_rows(items: Iterable[FeedItem]) -> list[FeedItem]:
    return [item for item in items if item.kind is ItemKind.DATA]


def has_data_rows(items: Iterable[FeedItem]) -> bool:
    return any(item.kind is ItemKind.DATA for item in items)


def entities_of(items: Iterable[FeedItem]) -> list[Entity]:
    return [item.entity for item in items if item.kind is ItemKind.DATA and item.entity is not None]


def trailing_marker(items: Sequence[FeedItem]) -> FeedItem | None:
    if items and items[-1].is_marker:
        return items[-1]
    return None


def append_page(items: Iterable[FeedItem], entities: Iterable[Entity]) -> list[FeedItem]:
    # Built from data rows only, so any trailing marker is dropped.
    return data_rows(items) + [data_row(e) for e in entities]


def with_marker(items: Iterable[FeedItem], marker: FeedItem) -> list[FeedItem]:
    if not marker.is_marker:
        raise ValueError(f"not a marker row: {marker.kind}")
    return data_rows(items) + [marker]
