"""Logging setup.

Modules log through named standard-library loggers under ``gbfsexporter``;
this module only installs handlers on that tree.

Example:
    >>> from gbfsexporter.core.logging import configure_logging
    >>> configure_logging("DEBUG", "json")
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

import orjson
from rich.logging import RichHandler

ROOT_LOGGER = "gbfsexporter"


class JSONFormatter(logging.Formatter):
    """Format records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload).decode()


def configure_logging(level: str | int = "INFO", fmt: str = "console") -> None:
    """Install a single handler on the ``gbfsexporter`` logger tree.

    Args:
        level: Logging level name or number.
        fmt: ``console`` for rich terminal output, ``json`` for log shippers.
    """
    handler: logging.Handler
    if fmt == "json":
        handler = logging.StreamHandler()
        handler.setFormatter(JSONFormatter())
    else:
        handler = RichHandler(rich_tracebacks=True, show_path=False)
        handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    logger.propagate = False
