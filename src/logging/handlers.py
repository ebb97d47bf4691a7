# src/logging/handlers.py — v2
"""Log file handler built from the FIGMADUMP_LOG_* settings."""

from __future__ import annotations

import logging
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

_UNITS = {"": 1, "B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3}
_SIZE = re.compile(r"^(\d+)\s*([KMG]?B)?$", re.IGNORECASE)


def parse_size(size: str) -> int:
    """Bytes in a size such as "10MB", "512kb" or "4096". "0" disables rotation."""
    match = _SIZE.match(size.strip())
    if not match:
        raise ValueError(f"Invalid log rotation size {size!r}, expected e.g. '10MB'")
    return int(match.group(1)) * _UNITS[(match.group(2) or "").upper()]


def create_file_handler(
    log_file: str | Path,
    rotation: str = "10MB",
    retention: int = 5,
) -> logging.FileHandler:
    """Append-mode handler for log_file, creating its directory.

    A rotation of 0 gives a plain FileHandler that grows without bound.
    Otherwise the file rolls over at that size and keeps `retention` backups.
    """
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)

    max_bytes = parse_size(rotation)
    if max_bytes == 0:
        return logging.FileHandler(path, encoding="utf-8")
    return RotatingFileHandler(path, maxBytes=max_bytes, backupCount=retention, encoding="utf-8")
