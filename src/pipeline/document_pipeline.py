# src/pipeline/document_pipeline.py — v2
"""Summary pipeline: resolve one document's summary through the cache.

Per document, in order:
  1. Freshness check against the fingerprint store
  2. Fresh hit: read the cached summary and return it untouched
  3. Miss: summarize, invalidate any stale fingerprint, write the summary,
     then record and persist the new fingerprint

The fingerprint is always written after the summary it vouches for, and a
stale fingerprint is dropped before the summary is overwritten. A crash at
any point therefore leaves no fingerprint that validates the wrong summary.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from readnext.cache.fingerprint import document_fingerprint
from readnext.core.models import Document, ResolvedSummary
from readnext.logging.context import set_document_context
from readnext.pipeline.locks import KeyedLock

if TYPE_CHECKING:
    from readnext.cache.base_cache_store import BaseArtifactCache
    from readnext.cache.json_store import JsonFingerprintStore
    from readnext.pipeline.summarizer import SummarizationPrompt, Summarizer


class SummaryPipeline:
    """Cache-or-derive resolution of document summaries.

    Usage:
        pipeline = SummaryPipeline(summarizer, fingerprints, summaries)
        summary = await pipeline.get_summary_for(document)
    """

    def __init__(
        self,
        summarizer: Summarizer,
        fingerprints: JsonFingerprintStore,
        summaries: BaseArtifactCache,
        logger: logging.Logger | None = None,
    ) -> None:
        self._summarizer = summarizer
        self._fingerprints = fingerprints
        self._summaries = summaries
        self._logger = logger or logging.getLogger(__name__)
        self._locks = KeyedLock()

    @property
    def summarizer(self) -> Summarizer:
        return self._summarizer

    @property
    def fingerprints(self) -> JsonFingerprintStore:
        return self._fingerprints

    @property
    def summaries(self) -> BaseArtifactCache:
        return self._summaries

    async def get_summary_for(
        self,
        document: Document,
        prompt: SummarizationPrompt | None = None,
    ) -> str:
        """Return the document's summary, deriving it on a cache miss."""
        resolved = await self.resolve(document, prompt)
        return resolved.summary

    async def resolve(
        self,
        document: Document,
        prompt: SummarizationPrompt | None = None,
    ) -> ResolvedSummary:
        """Resolve the summary and report how it was obtained.

        Documents without an id are summarized on every call and nothing
        is persisted for them.
        """
        set_document_context(document.id)

        if not document.id:
            self._logger.warning(
                "No id found for document, summary will not be cached",
                extra={"data": {"cache": "miss"}},
            )
            summary = await self._summarizer.summarize(document, prompt)
            return ResolvedSummary(
                document_id=None,
                summary=summary,
                fingerprint=document_fingerprint(document),
            )

        async with self._locks.hold(document.id):
            return await self._resolve_cached(document, document.id, prompt)

    async def _resolve_cached(
        self,
        document: Document,
        document_id: str,
        prompt: SummarizationPrompt | None,
    ) -> ResolvedSummary:
        fingerprint = document_fingerprint(document)
        fresh = self._fingerprints.is_fresh(document)

        if fresh:
            cached = await self._summaries.get(document_id)
            if cached is not None:
                self._logger.info(
                    "Using cached summary for %s", document_id,
                    extra={"data": {"cache": "hit", "id": document_id}},
                )
                return ResolvedSummary(
                    document_id=document_id,
                    summary=cached,
                    fingerprint=fingerprint,
                    cache_hit=True,
                    cached=True,
                )
            self._logger.warning(
                "Fingerprint for %s is fresh but its summary is missing", document_id,
            )

        self._logger.info(
            "No summary found for %s, will generate a new one", document_id,
            extra={"data": {"cache": "miss", "id": document_id}},
        )
        summary = await self._summarizer.summarize(document, prompt)

        if not fresh and self._fingerprints.forget(document_id):
            await self._fingerprints.persist()

        await self._summaries.put(document_id, summary)

        if not fresh:
            self._fingerprints.record(document)
            await self._fingerprints.persist()

        return ResolvedSummary(
            document_id=document_id,
            summary=summary,
            fingerprint=fingerprint,
            cached=True,
        )
