# src/rag/suggester.py — v1
"""Suggestion engine: related documents for a query document.

The query document's summary is resolved through the same pipeline used
for indexing, so suggesting for a document that was never indexed still
caches its summary. One extra neighbour is fetched so the query document
can be dropped from its own results.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from readnext.core.deadline import call_with_timeout
from readnext.core.models import RelatedDocument, Suggestions

if TYPE_CHECKING:
    from readnext.core.models import Document
    from readnext.pipeline.document_pipeline import SummaryPipeline
    from readnext.rag.vector_store.base_vector_store import BaseVectorStore


class SuggestionEngine:
    """Query the vector store for documents similar to a given one.

    Args:
        pipeline: Pipeline used to resolve the query document's summary.
        vector_store: Store holding the indexed summaries.
        strict_limit: Return at most `limit` results. By default up to
            `limit + 1` results are returned.
        call_timeout_s: Timeout for the similarity search call.
        logger: Logger for query events.
    """

    def __init__(
        self,
        pipeline: SummaryPipeline,
        vector_store: BaseVectorStore,
        strict_limit: bool = False,
        call_timeout_s: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._vector_store = vector_store
        self._strict_limit = strict_limit
        self._call_timeout_s = call_timeout_s
        self._logger = logger or logging.getLogger(__name__)

    async def suggest(self, document: Document, limit: int = 10) -> Suggestions:
        """Return documents related to `document`, closest first.

        Raises:
            IndexNotInitializedError: If the vector store is empty.
        """
        if limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")

        summary = await self._pipeline.get_summary_for(document)
        results = await call_with_timeout(
            self._vector_store.similarity_search_with_score(summary, k=limit + 1),
            self._call_timeout_s,
            operation="vector store search",
        )

        related = [
            RelatedDocument(source_document_id=r.source_document_id, score=r.score)
            for r in results
            if r.source_document_id is not None and r.source_document_id != document.id
        ]
        cutoff = limit if self._strict_limit else limit + 1
        related = related[:cutoff]

        self._logger.debug(
            "Found %d related documents for %s", len(related), document.id,
            extra={"data": {"id": document.id, "limit": limit}},
        )
        return Suggestions(id=document.id, related=related)
