# src/logging/handlers.py — v3
"""Size-rotated log file for long-running batch classification."""

from __future__ import annotations

import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

_SIZE_PATTERN = re.compile(r"(?P<amount>\d+)\s*(?P<unit>[KMG]?B)?", re.IGNORECASE)
_UNIT_BYTES = {"B": 1, "KB": 1 << 10, "MB": 1 << 20, "GB": 1 << 30}


def parse_size(size_str: str) -> int:
    """Bytes in a size string such as ``"10MB"``, ``"512kb"`` or ``"2048"``."""
    match = _SIZE_PATTERN.fullmatch(size_str.strip())
    if match is None:
        raise ValueError(f"Invalid size format: {size_str!r}. Use e.g. '10MB'.")
    unit = (match["unit"] or "B").upper()
    return int(match["amount"]) * _UNIT_BYTES[unit]


def create_rotating_handler(
    log_file: str | Path,
    rotation: str = "10MB",
    retention: int = 30,
) -> RotatingFileHandler:
    """File handler rotating at ``rotation`` bytes, keeping ``retention`` backups.

    Parent directories are created up front; the file itself is opened on
    the first emitted record.
    """
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        path,
        maxBytes=parse_size(rotation),
        backupCount=retention,
        encoding="utf-8",
        delay=True,
    )
