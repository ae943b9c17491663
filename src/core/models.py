# src/core/models.py — v2
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Metadata key linking an indexed summary back to its source document.
SOURCE_DOCUMENT_ID_KEY = "source_document_id"


# === INPUT DOCUMENTS ===


class Document(BaseModel):
    """A source document supplied by the caller.

    The id is optional: documents without one can still be summarized,
    but nothing derived from them is cached or indexed.
    """

    id: str | None = None
    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)


# === DERIVED ARTIFACTS ===


class SummaryDocument(BaseModel):
    """A summary ready to be embedded, linked to its source document."""

    content: str
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def source_document_id(self) -> str | None:
        return self.metadata.get(SOURCE_DOCUMENT_ID_KEY)

    @classmethod
    def for_source(cls, document_id: str | None, summary: str) -> SummaryDocument:
        """Build the summary document indexed for a source document."""
        return cls(content=summary, metadata={SOURCE_DOCUMENT_ID_KEY: document_id})


class ResolvedSummary(BaseModel):
    """Outcome of resolving one document's summary through the cache."""

    document_id: str | None
    summary: str
    fingerprint: str
    cache_hit: bool = False
    cached: bool = False


# === SUGGESTIONS ===


class RelatedDocument(BaseModel):
    """A document related to the query document (lower score = closer)."""

    source_document_id: str
    score: float


class Suggestions(BaseModel):
    """Ranked related documents for one query document."""

    id: str | None = None
    related: list[RelatedDocument] = Field(default_factory=list)
