# src/api/facade.py — v2
"""Public API facade: index documents and suggest related ones.

Usage:
    from readnext.api.facade import ReadNext
    read_next = await ReadNext.create(cache_dir="./.read-next")
    await read_next.index(documents)
    suggestions = await read_next.suggest(documents[0], limit=3)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import TYPE_CHECKING, Any, Sequence, Union

from readnext.api.models import IndexResult
from readnext.batch.scheduler import BoundedScheduler
from readnext.cache.cache_factory import create_cache_stores, default_cache_dir
from readnext.config.settings import Settings
from readnext.core.models import Document, Suggestions
from readnext.logging.context import set_operation_context
from readnext.logging.logger import get_logger
from readnext.pipeline.document_pipeline import SummaryPipeline
from readnext.pipeline.summarizer import Summarizer
from readnext.rag.indexer import SummaryIndexer
from readnext.rag.suggester import SuggestionEngine

if TYPE_CHECKING:
    from readnext.llm.base_client import BaseLLMClient
    from readnext.pipeline.summarizer import SummarizationPrompt
    from readnext.rag.embeddings.base_embedder import BaseEmbedder
    from readnext.rag.vector_store.base_vector_store import BaseVectorStore

DocumentLike = Union[Document, Mapping[str, Any]]


class ReadNext:
    """Related-content recommendations over a corpus of documents.

    Build instances with ReadNext.create(); the constructor takes already
    wired components.
    """

    def __init__(
        self,
        pipeline: SummaryPipeline,
        indexer: SummaryIndexer,
        suggester: SuggestionEngine,
        cache_dir: Path,
        parallel: int = 1,
        summarization_prompt: SummarizationPrompt | None = None,
        default_limit: int = 10,
        logger: logging.Logger | None = None,
    ) -> None:
        if parallel < 1:
            raise ValueError(f"parallel must be >= 1, got {parallel}")
        self._pipeline = pipeline
        self._indexer = indexer
        self._suggester = suggester
        self._cache_dir = cache_dir
        self._parallel = parallel
        self._summarization_prompt = summarization_prompt
        self._default_limit = default_limit
        self._logger = logger or get_logger("api")

    @classmethod
    async def create(
        cls,
        settings: Settings | None = None,
        *,
        vector_store: BaseVectorStore | None = None,
        embedder: BaseEmbedder | None = None,
        llm: BaseLLMClient | None = None,
        summarizer: Summarizer | None = None,
        summarization_prompt: SummarizationPrompt | None = None,
        cache_dir: Path | str | None = None,
        parallel: int | None = None,
        logger: logging.Logger | None = None,
    ) -> ReadNext:
        """Wire up a ReadNext instance.

        Explicit arguments win over settings. Components left as None are
        built from settings: the LLM and embedder through their provider
        factories, the vector store loaded from the cache directory when a
        saved index exists there, otherwise created empty.

        Args:
            settings: Application settings. Loaded from .env if None.
            vector_store: Externally supplied vector store.
            embedder: Embedder for a vector store built here.
            llm: Chat client for a summarizer built here.
            summarizer: Fully built summarizer (llm is then ignored).
            summarization_prompt: Default prompt, a string or a callable
                taking the document.
            cache_dir: Cache root. Defaults to settings, then a temp dir.
            parallel: Default indexing concurrency.
            logger: Logger shared by every component.
        """
        settings = settings or Settings()
        logger = logger or get_logger("api")
        root = Path(cache_dir or settings.cache_dir or default_cache_dir()).expanduser()

        fingerprints, summaries = create_cache_stores(root, logger=logger)

        if summarizer is None:
            if llm is None:
                from readnext.llm.client_factory import create_llm_client

                llm = create_llm_client(settings=settings)
            summarizer = Summarizer(
                llm,
                prompt=settings.summarization_prompt or None,
                max_tokens=settings.llm_max_tokens,
                temperature=settings.llm_temperature,
                timeout_s=settings.call_timeout_s,
                logger=logger,
            )

        store_dir = Path(settings.vector_db_path or root).expanduser()
        if vector_store is None:
            from readnext.rag.vector_store.vector_store_factory import create_vector_store

            if embedder is None:
                from readnext.rag.embeddings.embedder_factory import create_embedder

                embedder = create_embedder(settings)
            vector_store = create_vector_store(settings, embedder, store_dir)

        pipeline = SummaryPipeline(summarizer, fingerprints, summaries, logger=logger)
        indexer = SummaryIndexer(
            pipeline,
            vector_store,
            store_dir,
            call_timeout_s=settings.call_timeout_s,
            logger=logger,
        )
        suggester = SuggestionEngine(
            pipeline,
            vector_store,
            strict_limit=settings.suggest_strict_limit,
            call_timeout_s=settings.call_timeout_s,
            logger=logger,
        )

        logger.debug(
            "ReadNext ready: cache_dir=%s, vector_store=%s, parallel=%s",
            root, vector_store.provider_name, parallel or settings.parallel,
        )
        return cls(
            pipeline,
            indexer,
            suggester,
            cache_dir=root,
            parallel=parallel or settings.parallel,
            summarization_prompt=summarization_prompt,
            default_limit=settings.suggest_default_limit,
            logger=logger,
        )

    # --- Properties ---

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    @property
    def parallel(self) -> int:
        return self._parallel

    @property
    def pipeline(self) -> SummaryPipeline:
        return self._pipeline

    @property
    def vector_store(self) -> BaseVectorStore:
        return self._indexer.vector_store

    # --- Operations ---

    async def index(
        self,
        source_documents: Sequence[DocumentLike],
        parallel: int | None = None,
        summarization_prompt: SummarizationPrompt | None = None,
        fail_fast: bool = False,
    ) -> IndexResult:
        """Summarize and index documents, at most `parallel` at a time.

        A document that fails does not stop the others; inspect
        `IndexResult.outcomes` or call `raise_for_failures()`. The vector
        store is saved once at the end when anything was added.
        """
        set_operation_context("index")
        documents = [_as_document(d) for d in source_documents]
        prompt = summarization_prompt or self._summarization_prompt
        scheduler = BoundedScheduler(parallel or self._parallel, logger=self._logger)

        self._logger.info(
            "Indexing %d documents (parallel=%d)", len(documents), scheduler.parallel,
        )
        outcomes = await scheduler.run(
            documents,
            lambda document: self._indexer.index_document(document, prompt),
            fail_fast=fail_fast,
        )

        produced = [o.value for o in outcomes if o.ok]
        entries_added = sum(1 for indexed in produced if indexed.indexed)
        saved = await self._indexer.flush(entries_added)

        result = IndexResult(
            documents=[indexed.summary_document for indexed in produced],
            outcomes=outcomes,
            entries_added=entries_added,
            saved=saved,
        )
        self._logger.info(
            "Indexing complete: %d indexed, %d failed, %d skipped",
            entries_added, len(result.failures), len(result.skipped),
        )
        return result

    async def get_summary_for(self, source_document: DocumentLike) -> str:
        """Return the cached summary, deriving it on a miss. Nothing is indexed."""
        set_operation_context("summary")
        return await self._pipeline.get_summary_for(
            _as_document(source_document), self._summarization_prompt,
        )

    async def suggest(
        self,
        source_document: DocumentLike,
        limit: int | None = None,
    ) -> Suggestions:
        """Return documents related to source_document, closest first.

        Raises:
            IndexNotInitializedError: If nothing has been indexed yet.
        """
        set_operation_context("suggest")
        return await self._suggester.suggest(
            _as_document(source_document),
            limit=self._default_limit if limit is None else limit,
        )

    async def summarize(self, source_document: DocumentLike) -> str:
        """Summarize without reading or writing the cache."""
        set_operation_context("summarize")
        return await self._pipeline.summarizer.summarize(
            _as_document(source_document), self._summarization_prompt,
        )


def _as_document(document: DocumentLike) -> Document:
    if isinstance(document, Document):
        return document
    return Document.model_validate(document)
