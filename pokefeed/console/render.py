from __future__ import annotations

from pokefeed.feed.items import FeedItem, ItemKind
from pokefeed.result import Result
from pokefeed.utils import truncate


def render_row(item: FeedItem, max_chars: int = 120) -> str:
    if item.kind is ItemKind.LOADING:
        return "… loading more"
    if item.kind is ItemKind.ERROR:
        return "! could not load the next page (retry with --retry)"

    entity = item.entity
    if entity is None:
        return "?"
    if entity.detail is None:
        line = f"#{entity.id} {entity.name}  (no detail)"
    else:
        d = entity.detail
        line = f"#{entity.id} {entity.name}  move={d.move or '-'} weight={d.weight} image={d.image_ref}"
    return truncate(line, max_chars)


def render_feed(state: Result[list[FeedItem]] | None) -> str:
    if state is None:
        return "(nothing loaded yet)"
    if state.is_failure:
        return f"failed to load the catalog: {state.error}"

    items = state.value or []
    if not items:
        return "(empty catalog)"
    return "\n".join(render_row(item) for item in items)
