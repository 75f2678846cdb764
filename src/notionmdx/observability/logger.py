"""Structured JSON logging for notionmdx.

Each record becomes one JSON object per line, so render and fetch traces
can be shipped to a log pipeline as-is::

    {"ts": "2026-01-01T12:00:00.123456+00:00", "level": "DEBUG",
     "logger": "notionmdx.renderer", "message": "Block transformed",
     "block_type": "paragraph", "target": "content"}

Usage::

    from notionmdx.observability import get_logger

    log = get_logger("notionmdx.renderer")
    log.debug("Block transformed", extra={"extra_fields": {"block_type": "paragraph"}})

Loggers start at ``WARNING``; lower the level on the returned logger to
trace individual blocks.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    Guaranteed keys are ``ts`` (ISO-8601 UTC), ``level``, ``logger`` and
    ``message``.  Fields passed as ``extra={"extra_fields": {...}}`` are
    merged into the top-level object; ``exception`` and ``stack_info`` are
    added when the record carries them.
    """

    def format(self, record: logging.LogRecord) -> str:
        log_entry: dict[str, Any] = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra_fields: dict[str, Any] | None = getattr(
            record, "extra_fields", None
        )
        if extra_fields is not None:
            log_entry.update(extra_fields)

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            log_entry["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(log_entry, default=str)


# One handler per logger name, so repeated ``get_logger`` calls never stack
# duplicate handlers.
_configured_loggers: set[str] = set()


def get_logger(
    name: str = "notionmdx",
    *,
    level: int | str = logging.WARNING,
    stream: Any | None = None,
) -> logging.Logger:
    """Get or create a structured JSON logger.

    Parameters
    ----------
    name:
        Logger name, e.g. ``"notionmdx.renderer"``.
    level:
        Initial level, as an ``int`` or a case-insensitive level name.
        Only applied the first time *name* is configured.
    stream:
        Output stream for the handler.  Defaults to ``sys.stderr``.

    Returns
    -------
    logging.Logger
        The configured logger.  Repeated calls return the same object.
    """
    logger = logging.getLogger(name)

    if name not in _configured_loggers:
        resolved_level = (
            logging.getLevelName(level.upper())
            if isinstance(level, str)
            else level
        )
        logger.setLevel(resolved_level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(StructuredFormatter())
        logger.addHandler(handler)
        logger.propagate = False

        _configured_loggers.add(name)

    return logger
