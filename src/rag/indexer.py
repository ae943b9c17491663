# src/rag/indexer.py — v2
"""Summary indexer: keeps the vector store in step with the summary cache.

For each document, after its summary is resolved through the pipeline:
  1. Delete the id's existing vector entry (a missing entry is not a failure)
  2. Add the summary under the id, with the source document id as metadata

The store is saved once per batch by flush(), and only when something was
added, so backends that cannot save an empty index are never asked to.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel

from readnext.core.deadline import call_with_timeout
from readnext.core.models import SummaryDocument
from readnext.pipeline.locks import KeyedLock
from readnext.rag.vector_store.base_vector_store import VectorEntryNotFoundError

if TYPE_CHECKING:
    from readnext.core.models import Document
    from readnext.pipeline.document_pipeline import SummaryPipeline
    from readnext.pipeline.summarizer import SummarizationPrompt
    from readnext.rag.vector_store.base_vector_store import BaseVectorStore


class IndexedSummary(BaseModel):
    """Result of indexing one document."""

    summary_document: SummaryDocument
    indexed: bool = False
    cache_hit: bool = False


class SummaryIndexer:
    """Index document summaries into a vector store.

    Args:
        pipeline: Pipeline used to resolve (and cache) summaries.
        vector_store: Store receiving one entry per document id.
        cache_dir: Directory the store is saved to by flush().
        call_timeout_s: Timeout for each vector store call.
        logger: Logger for indexing events.
    """

    def __init__(
        self,
        pipeline: SummaryPipeline,
        vector_store: BaseVectorStore,
        cache_dir: Path | str,
        call_timeout_s: float | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._pipeline = pipeline
        self._vector_store = vector_store
        self._cache_dir = Path(cache_dir)
        self._call_timeout_s = call_timeout_s
        self._logger = logger or logging.getLogger(__name__)
        self._locks = KeyedLock()

    @property
    def vector_store(self) -> BaseVectorStore:
        return self._vector_store

    async def index_document(
        self,
        document: Document,
        prompt: SummarizationPrompt | None = None,
    ) -> IndexedSummary:
        """Resolve the document's summary and replace its vector entry.

        Documents without an id get a summary but no vector entry.
        """
        resolved = await self._pipeline.resolve(document, prompt)
        summary_document = SummaryDocument.for_source(document.id, resolved.summary)

        if not document.id:
            self._logger.warning("No id found for document, it will not be indexed")
            return IndexedSummary(summary_document=summary_document)

        async with self._locks.hold(document.id):
            await self._delete_existing(document.id)
            await call_with_timeout(
                self._vector_store.add_documents([summary_document], ids=[document.id]),
                self._call_timeout_s,
                operation=f"vector store add {document.id}",
            )

        self._logger.debug(
            "Indexed %s", document.id,
            extra={"data": {"id": document.id, "cache": "hit" if resolved.cache_hit else "miss"}},
        )
        return IndexedSummary(
            summary_document=summary_document,
            indexed=True,
            cache_hit=resolved.cache_hit,
        )

    async def flush(self, entries_added: int) -> bool:
        """Save the vector store once for a finished batch.

        Returns:
            True if the store was saved. False when nothing was added, the
            store has no persistence, or saving failed (logged, not raised).
        """
        if entries_added <= 0:
            self._logger.debug("Nothing added, skipping vector store save")
            return False
        if not self._vector_store.supports_persistence:
            return False
        try:
            await self._vector_store.save(self._cache_dir)
        except Exception:
            self._logger.exception(
                "Failed to save vector store to %s; in-memory index is ahead of disk",
                self._cache_dir,
            )
            return False
        self._logger.info(
            "Saved vector store (%d new entries) to %s", entries_added, self._cache_dir,
        )
        return True

    async def _delete_existing(self, document_id: str) -> None:
        try:
            await call_with_timeout(
                self._vector_store.delete([document_id]),
                self._call_timeout_s,
                operation=f"vector store delete {document_id}",
            )
        except VectorEntryNotFoundError:
            self._logger.debug("No previous vector entry for %s", document_id)
