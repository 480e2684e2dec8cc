from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import aiosqlite

from pokefeed.catalog.types import Detail, Entity
from pokefeed.feed.session import SessionSnapshot
from pokefeed.storage.schema import SCHEMA_SQL
from pokefeed.utils import now_utc


logger = logging.getLogger(__name__)


def _entity_to_dict(entity: Entity) -> dict[str, Any]:
    detail = None
    if entity.detail is not None:
        detail = {
            "image_ref": entity.detail.image_ref,
            "move": entity.detail.move,
            "weight": entity.detail.weight,
        }
    return {"id": entity.id, "name": entity.name, "detail": detail}


def _entity_from_dict(data: dict[str, Any]) -> Entity:
    raw_detail = data.get("detail")
    detail = None
    if raw_detail:
        detail = Detail(
            image_ref=str(raw_detail["image_ref"]),
            move=str(raw_detail.get("move") or ""),
            weight=int(raw_detail["weight"]),
        )
    return Entity(id=str(data["id"]), name=str(data["name"]), detail=detail)


class SessionStore:
    """Keeps one restorable snapshot per session id."""

    def __init__(self, sqlite_path: Path):
        self._path = sqlite_path
        self._db: aiosqlite.Connection | None = None
        self._lock = asyncio.Lock()

    async def connect(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._db = await aiosqlite.connect(self._path.as_posix())
        self._db.row_factory = aiosqlite.Row
        await self._db.executescript(SCHEMA_SQL)
        await self._db.commit()

    async def close(self) -> None:
        if self._db is not None:
            await self._db.close()
            self._db = None

    def _conn(self) -> aiosqlite.Connection:
        if self._db is None:
            raise RuntimeError("session store not connected")
        return self._db

    async def save_snapshot(self, session_id: str, snapshot: SessionSnapshot) -> None:
        entities_json = None
        if snapshot.entities is not None:
            entities_json = json.dumps([_entity_to_dict(e) for e in snapshot.entities], ensure_ascii=False)
        now = now_utc().isoformat()

        async with self._lock:
            conn = self._conn()
            await conn.execute(
                "INSERT INTO sessions(session_id, next_page_to_load, entities_json, created_at, updated_at) "
                "VALUES(?, ?, ?, ?, ?) "
                "ON CONFLICT(session_id) DO UPDATE SET next_page_to_load=excluded.next_page_to_load, "
                "entities_json=excluded.entities_json, updated_at=excluded.updated_at",
                (session_id, snapshot.next_page_to_load, entities_json, now, now),
            )
            await conn.commit()
        logger.debug("session=%s saved next_page=%s", session_id, snapshot.next_page_to_load)

    async def load_snapshot(self, session_id: str) -> SessionSnapshot | None:
        async with self._lock:
            conn = self._conn()
            cursor = await conn.execute(
                "SELECT next_page_to_load, entities_json FROM sessions WHERE session_id=?",
                (session_id,),
            )
            row = await cursor.fetchone()
        if row is None:
            return None

        entities = None
        if row["entities_json"] is not None:
            entities = tuple(_entity_from_dict(d) for d in json.loads(row["entities_json"]))
        return SessionSnapshot(next_page_to_load=int(row["next_page_to_load"]), entities=entities)

    async def delete_snapshot(self, session_id: str) -> bool:
        async with self._lock:
            conn = self._conn()
            cursor = await conn.execute("DELETE FROM sessions WHERE session_id=?", (session_id,))
            await conn.commit()
            return cursor.rowcount > 0
