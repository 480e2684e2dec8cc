from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import sys


_QUIET_LOGGERS = ("httpx", "httpcore", "aiosqlite")


def setup_logging(level: str, log_file: str) -> None:
    """Log to stderr (stdout carries the rendered feed) and optionally to a rotating file."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(
            RotatingFileHandler(
                log_file,
                maxBytes=5 * 1024 * 1024,
                backupCount=3,
                encoding="utf-8",
            )
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
