# src/logging/logger.py — v3
"""Log formatting for figmadump.

Every record carries the current run/stage/scope context. JSON output puts
those fields at the top level of each line so a log file can be filtered
per run or per file key with jq; text output prefixes them as
``[stage scope]``.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TYPE_CHECKING, Any

from figmadump.logging.context import get_context

if TYPE_CHECKING:
    from figmadump.config.settings import Settings

ROOT_LOGGER = "figmadump"

# Chatty per-request loggers of the HTTP stack.
_QUIET = ("httpx", "httpcore")


class JsonFormatter(logging.Formatter):
    """One JSON object per line, context fields inlined."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            **get_context().as_dict(),
            "message": record.getMessage(),
        }
        data = getattr(record, "data", None)
        if data:
            entry["data"] = data
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """``12:00:01 INFO  figmadump.pipeline [files project 1] message``"""

    def __init__(self) -> None:
        super().__init__("%(asctime)s %(levelname)-5s %(name)s%(context)s %(message)s", "%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        tags = " ".join(t for t in (ctx.stage, ctx.scope) if t)
        record.context = f" [{tags}]" if tags else ""
        return super().format(record)


def setup_logging(
    level: str = "INFO",
    log_format: str = "text",
    log_file: str | Path | None = None,
    rotation: str = "10MB",
    retention: int = 5,
) -> None:
    """Route the figmadump logger tree to stderr and, optionally, a file.

    Safe to call more than once: earlier handlers are closed and replaced.
    """
    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level.upper())
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()

    formatter = JsonFormatter() if log_format == "json" else TextFormatter()
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        from figmadump.logging.handlers import create_file_handler

        handlers.append(create_file_handler(log_file, rotation, retention))
    for handler in handlers:
        handler.setFormatter(formatter)
        root.addHandler(handler)

    for name in _QUIET:
        logging.getLogger(name).setLevel(logging.WARNING)


def configure_logging(settings: Settings, verbose: bool = False) -> None:
    """setup_logging() from the FIGMADUMP_LOG_* settings; verbose forces DEBUG."""
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )
