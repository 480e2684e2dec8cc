from __future__ import annotations

from dataclasses import dataclass

from pokefeed.catalog.types import Entity


@dataclass
class SessionState:
    """Mutable pagination cursor and guard flags.

    Written only by the owning FeedController, from a single control sequence.
    The flags are plain booleans, not locks.
    """

    next_page_to_load: int = 1
    is_fetching_next_page: bool = False
    has_unresolved_error: bool = False

    def __post_init__(self) -> None:
        if self.next_page_to_load < 1:
            raise ValueError(f"next_page_to_load must be >= 1, got {self.next_page_to_load}")


@dataclass(frozen=True)
class SessionSnapshot:
    """The part of a session that survives teardown/restore.

    `entities` is None when no successful feed was ever published.
    """

    next_page_to_load: int
    entities: tuple[Entity, ...] | None
