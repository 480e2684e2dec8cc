from __future__ import annotations

from typing import Any

from pokefeed.catalog.errors import CatalogError, ERROR_PARSE_FAIL
from pokefeed.catalog.types import Detail, Entity


def _id_from_url(url: str) -> str | None:
    # ".../pokemon/25/" -> "25"
    tail = (url or "").rstrip("/").rsplit("/", 1)[-1]
    return tail if tail.isdigit() else None


def parse_listing(payload: Any) -> list[Entity]:
    if not isinstance(payload, dict):
        raise CatalogError(ERROR_PARSE_FAIL, "listing payload is not an object")
    results = payload.get("results")
    if not isinstance(results, list):
        raise CatalogError(ERROR_PARSE_FAIL, "listing payload has no results")

    entities: list[Entity] = []
    for raw in results:
        if not isinstance(raw, dict):
            continue
        name = raw.get("name")
        if not name:
            continue
        entity_id = _id_from_url(str(raw.get("url") or "")) or str(name)
        entities.append(Entity(id=entity_id, name=str(name)))
    return entities


def parse_detail(payload: Any) -> Detail:
    if not isinstance(payload, dict):
        raise CatalogError(ERROR_PARSE_FAIL, "detail payload is not an object")

    sprites = payload.get("sprites") or {}
    image = sprites.get("front_default") if isinstance(sprites, dict) else None
    if not image:
        raise CatalogError(ERROR_PARSE_FAIL, "detail has no image")

    weight = payload.get("weight")
    if isinstance(weight, bool) or not isinstance(weight, int):
        raise CatalogError(ERROR_PARSE_FAIL, f"detail weight is not an integer: {weight!r}")

    move = ""
    moves = payload.get("moves") or []
    if moves and isinstance(moves[0], dict):
        move = str((moves[0].get("move") or {}).get("name") or "")

    return Detail(image_ref=str(image), move=move, weight=weight)
