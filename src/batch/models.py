# src/batch/models.py — v2
"""Batch processing models: DocumentOutcome, ScanEntry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal

from pydantic import BaseModel


@dataclass
class DocumentOutcome:
    """Result of running one item through the scheduler.

    Exactly one of value/error is meaningful, depending on status.
    """

    position: int
    document_id: str | None
    status: Literal["succeeded", "failed", "skipped"]
    value: Any = None
    error: BaseException | None = None
    duration_ms: int = 0

    @property
    def ok(self) -> bool:
        return self.status == "succeeded"

    @property
    def reason(self) -> str | None:
        """Short failure description, if any."""
        if self.error is None:
            return None
        return f"{type(self.error).__name__}: {self.error}"


class ScanEntry(BaseModel):
    """A single file discovered during a directory scan."""

    file_path: str
    document_id: str
    format: str
    size_bytes: int
