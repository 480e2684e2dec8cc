from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
import os


def _env_str(name: str, default: str | None = None) -> str:
    value = os.getenv(name)
    if value is None:
        if default is None:
            raise RuntimeError(f"Missing required env: {name}")
        return default
    return value


def _env_int(name: str, default: int | None = None) -> int:
    value = os.getenv(name)
    if value is None:
        if default is None:
            raise RuntimeError(f"Missing required env: {name}")
        return default
    return int(value)


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    value = value.strip().lower()
    return value in {"1", "true", "yes", "y", "on"}


@dataclass(frozen=True)
class Config:
    # Catalog API
    api_base_url: str
    page_size: int
    http_timeout_seconds: int
    http_max_attempts: int
    user_agent: str

    # Session storage
    sqlite_path: Path
    session_id: str

    # Metrics
    metrics_enabled: bool
    metrics_bind: str
    metrics_port: int
    status_json_path: Path

    # Logging
    log_level: str
    log_file: str

    def __post_init__(self) -> None:
        if self.page_size < 1:
            raise ValueError(f"CATALOG_PAGE_SIZE must be >= 1, got {self.page_size}")
        if self.http_max_attempts < 1:
            raise ValueError(f"CATALOG_HTTP_MAX_ATTEMPTS must be >= 1, got {self.http_max_attempts}")


def load_config() -> Config:
    return Config(
        api_base_url=_env_str("CATALOG_BASE_URL", "https://pokeapi.co/api/v2/"),
        page_size=_env_int("CATALOG_PAGE_SIZE", 20),
        http_timeout_seconds=_env_int("CATALOG_HTTP_TIMEOUT_SECONDS", 20),
        http_max_attempts=_env_int("CATALOG_HTTP_MAX_ATTEMPTS", 1),
        user_agent=_env_str("USER_AGENT", "pokefeed/0.1"),
        sqlite_path=Path(_env_str("SQLITE_PATH", "data/pokefeed.db")),
        session_id=_env_str("SESSION_ID", "default"),
        metrics_enabled=_env_bool("METRICS_ENABLED", False),
        metrics_bind=_env_str("METRICS_BIND", "127.0.0.1"),
        metrics_port=_env_int("METRICS_PORT", 9109),
        status_json_path=Path(_env_str("STATUS_JSON_PATH", "data/status.json")),
        log_level=_env_str("LOG_LEVEL", "INFO"),
        log_file=_env_str("LOG_FILE", ""),
    )
