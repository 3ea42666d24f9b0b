# src/logging/logger.py — v3
"""Log formatters and one-call setup for the ``spamsentinel`` logger tree.

Every record is stamped with the current request context (request_id,
fingerprint prefix, strategy). Email text itself is never part of a log
message; only fingerprints identify inputs.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from spamsentinel.logging.context import get_context

if TYPE_CHECKING:
    from spamsentinel.config.settings import Settings

ROOT_LOGGER_NAME = "spamsentinel"


def _timestamp(record: logging.LogRecord) -> datetime:
    return datetime.fromtimestamp(record.created, tz=timezone.utc)


def _exception_text(formatter: logging.Formatter, record: logging.LogRecord) -> str | None:
    if record.exc_info and record.exc_info[1] is not None:
        return formatter.formatException(record.exc_info)
    return None


class JsonFormatter(logging.Formatter):
    """One JSON object per line: timestamp, level, logger, message, then
    ``context``, ``data`` (from ``extra={"data": ...}``) and ``exception``
    when present."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": _timestamp(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_context().as_dict()
        if context:
            entry["context"] = context
        data = getattr(record, "data", None)
        if data:
            entry["data"] = data
        exception = _exception_text(self, record)
        if exception:
            entry["exception"] = exception
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Single-line format for terminals, e.g.
    ``2026-01-02 10:00:00 [INFO    ] spamsentinel.pipeline <ab12> [memory] - message``.
    """

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        line = f"{_timestamp(record):%Y-%m-%d %H:%M:%S} [{record.levelname:8s}] {record.name}"
        if ctx.request_id:
            line += f" <{ctx.request_id}>"
        if ctx.strategy:
            line += f" [{ctx.strategy}]"
        line += f" - {record.getMessage()}"
        exception = _exception_text(self, record)
        return f"{line}\n{exception}" if exception else line


_FORMATTERS: dict[str, type[logging.Formatter]] = {
    "json": JsonFormatter,
    "text": TextFormatter,
}


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: str | Path | None = None,
    rotation: str = "10MB",
    retention: int = 30,
) -> None:
    """(Re)configure the ``spamsentinel`` logger.

    Logs go to stderr, since stdout carries CLI results, and optionally to a
    size-rotated file. Calling again replaces the previous handlers.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    root.handlers.clear()

    formatter = _FORMATTERS.get(log_format, TextFormatter)()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        from spamsentinel.logging.handlers import create_rotating_handler

        handlers.append(create_rotating_handler(log_file, rotation=rotation, retention=retention))

    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)


def setup_logging_from_settings(settings: Settings) -> None:
    setup_logging(
        level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
