# src/rag/models.py — v1
"""RAG models: SearchResult."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from readnext.core.models import SOURCE_DOCUMENT_ID_KEY


class SearchResult(BaseModel):
    """One nearest-neighbour hit. Lower score means more similar."""

    id: str
    content: str
    score: float
    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def source_document_id(self) -> str | None:
        return self.metadata.get(SOURCE_DOCUMENT_ID_KEY)
