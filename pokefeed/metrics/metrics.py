from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from prometheus_client import CollectorRegistry, Counter, Histogram, start_http_server


logger = logging.getLogger(__name__)


@dataclass
class RuntimeStats:
    session_id: str = ""
    next_page_to_load: int = 1
    has_unresolved_error: bool = False
    rows: int = 0
    feed_failed: bool = False
    updated_ts: float | None = None


class Metrics:
    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry if registry is not None else CollectorRegistry()

        self.page_loads_total = Counter("feed_page_loads_total", "Pages merged into the feed", registry=self.registry)
        self.page_failures_total = Counter("feed_page_failures_total", "Failed page loads", registry=self.registry)
        self.detail_failures_total = Counter(
            "feed_detail_failures_total", "Detail lookups absorbed as missing", registry=self.registry
        )
        self.refresh_failures_total = Counter("feed_refresh_failures_total", "Failed refreshes", registry=self.registry)
        self.load_next_skipped_total = Counter(
            "feed_load_next_skipped_total", "load_next calls dropped by a guard", ["reason"], registry=self.registry
        )
        self.page_load_seconds = Histogram(
            "feed_page_load_seconds",
            "Listing plus detail fan-out latency",
            buckets=(0.1, 0.25, 0.5, 1, 2, 5, 10, 30),
            registry=self.registry,
        )

    def start_server(self, bind: str, port: int) -> None:
        start_http_server(port, addr=bind, registry=self.registry)
        logger.info("metrics server started at %s:%s", bind, port)

    def sample(self, name: str, labels: dict[str, str] | None = None) -> float:
        value = self.registry.get_sample_value(name, labels or {})
        return float(value or 0.0)


def write_status_json(path: Path, data: dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp = path.with_suffix(path.suffix + ".tmp")
    with tmp.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)
    tmp.replace(path)
