# src/logging/context.py — v2
"""Contextual logging support: attach document_id and operation to log records.

Context variables are task-local under asyncio, so each scheduler worker
carries the id of the document it is currently processing.
"""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

_document_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "document_id", default=None
)
_operation: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "operation", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    document_id: str | None = None
    operation: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(document_id=_document_id.get(), operation=_operation.get())


def set_document_context(document_id: str | None, operation: str | None = None) -> None:
    """Set document-level context (called once per document run)."""
    _document_id.set(document_id)
    if operation is not None:
        _operation.set(operation)


def set_operation_context(operation: str) -> None:
    """Set the public operation being served (index, suggest, summary)."""
    _operation.set(operation)


def clear_context() -> None:
    """Reset all context variables."""
    _document_id.set(None)
    _operation.set(None)
