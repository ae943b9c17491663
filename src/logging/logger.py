# src/logging/logger.py — v2
"""Logger factory with JSON, text and cache-indicating console formatters.

Structured fields travel on the record as ``extra={"data": {...}}``. Two
keys are understood by CacheIndicatingFormatter: ``cache`` ("hit" or
"miss") and ``expensive`` (True for paid model calls).
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any

from readnext.logging.context import get_context

_CACHE_HIT = "\u001b[32m•\u001b[0m"
_CACHE_MISS = "\u001b[31m•\u001b[0m"
_EXPENSIVE = "\u001b[33m⏳\u001b[0m"
_LABEL_WIDTH = 4


def _record_data(record: logging.LogRecord) -> dict[str, Any]:
    data = getattr(record, "data", None)
    return data if isinstance(data, dict) else {}


class JsonFormatter(logging.Formatter):
    """Structured JSON log formatter."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context_dict = ctx.as_dict()
        if context_dict:
            log_entry["context"] = context_dict

        data = _record_data(record)
        if data:
            log_entry["data"] = data

        if record.exc_info and record.exc_info[1] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable text formatter for development."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        parts = [
            datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S"),
            f"[{record.levelname:8s}]",
            record.name,
        ]
        if ctx.operation:
            parts.append(f"[{ctx.operation}]")
        if ctx.document_id:
            parts.append(f"({ctx.document_id})")
        parts.append(f"- {record.getMessage()}")
        text = " ".join(parts)
        if record.exc_info and record.exc_info[1] is not None:
            text = f"{text}\n{self.formatException(record.exc_info)}"
        return text


class CacheIndicatingFormatter(logging.Formatter):
    """Console formatter that makes cache behaviour visible at a glance.

    Prints the document id on its own line whenever it changes, then each
    message behind a fixed-width label column: a green dot for a cache hit,
    a red dot for a miss and an hourglass for an expensive model call.
    The "previous id" state belongs to the formatter instance.
    """

    def __init__(self) -> None:
        super().__init__()
        self._previous_id: str | None = None

    def format(self, record: logging.LogRecord) -> str:
        data = _record_data(record)
        document_id = get_context().document_id
        header = ""
        if document_id != self._previous_id:
            self._previous_id = document_id
            if document_id is not None:
                header = f"\n{document_id}\n"

        labels: list[str] = []
        width = 0
        if data.get("expensive"):
            # The hourglass renders two columns wide.
            labels.append(_EXPENSIVE)
            width += 2
        if data.get("cache") == "hit":
            labels.append(_CACHE_HIT)
            width += 1
        elif data.get("cache") == "miss":
            labels.append(_CACHE_MISS)
            width += 1
        labels.append(" " * max(_LABEL_WIDTH - width, 0))

        message = record.getMessage()
        if record.levelno >= logging.WARNING:
            message = f"{record.levelname}: {message}"
        if record.exc_info and record.exc_info[1] is not None:
            message = f"{message}\n{self.formatException(record.exc_info)}"
        return f"{header}{''.join(labels)}{message}"


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Configuration is applied by setup_logging()."""
    return logging.getLogger(f"readnext.{name}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "pretty",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 5,
) -> logging.Logger:
    """Configure the root readnext logger.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: Console format ("json", "text" or "pretty").
        log_file: Path to log file (None = console only). Files always get JSON.
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.

    Returns:
        The configured "readnext" logger.
    """
    root_logger = logging.getLogger("readnext")
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    # Remove existing handlers to avoid duplicates on re-init
    root_logger.handlers.clear()

    formatter: logging.Formatter
    if log_format == "json":
        formatter = JsonFormatter()
    elif log_format == "text":
        formatter = TextFormatter()
    else:
        formatter = CacheIndicatingFormatter()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        from readnext.logging.handlers import create_rotating_handler

        file_handler = create_rotating_handler(
            log_file, rotation=rotation, retention=retention
        )
        file_handler.setFormatter(JsonFormatter())
        root_logger.addHandler(file_handler)

    return root_logger
