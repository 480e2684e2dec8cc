from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class Detail:
    image_ref: str
    move: str
    weight: int


@dataclass(frozen=True)
class Entity:
    id: str
    name: str
    detail: Detail | None = None

    def with_detail(self, detail: Detail | None) -> Entity:
        return replace(self, detail=detail)
