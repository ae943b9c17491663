# tests/unit/rag/test_unit_suggester.py — v1
"""Tests for rag.suggester — self-exclusion, ordering and limits."""

from __future__ import annotations

from pathlib import Path

import pytest
import pytest_asyncio

from readnext.core.models import Document
from readnext.pipeline.document_pipeline import SummaryPipeline
from readnext.rag.indexer import SummaryIndexer
from readnext.rag.suggester import SuggestionEngine
from readnext.rag.vector_store.base_vector_store import IndexNotInitializedError
from readnext.rag.vector_store.faiss_store import FaissVectorStore

from tests.conftest import MockEmbedder, MockLLMClient


@pytest.fixture
def line_store() -> FaissVectorStore:
    """Summaries of documents '1'..'5' sit on a line at x = 1..5."""
    embedder = MockEmbedder(
        dimensions=2,
        fixed={f"summary: doc {i}": [float(i), 0.0] for i in range(1, 6)},
    )
    return FaissVectorStore(embedder)


@pytest_asyncio.fixture
async def indexed(pipeline: SummaryPipeline, line_store: FaissVectorStore, tmp_cache_dir: Path):
    indexer = SummaryIndexer(pipeline, line_store, tmp_cache_dir)
    for i in range(1, 6):
        await indexer.index_document(Document(id=str(i), content=f"doc {i}"))
    return line_store


class TestSuggest:
    @pytest.mark.asyncio
    async def test_excludes_self_and_orders_by_score(self, pipeline, indexed):
        engine = SuggestionEngine(pipeline, indexed)
        result = await engine.suggest(Document(id="3", content="doc 3"), limit=2)

        assert result.id == "3"
        ids = [r.source_document_id for r in result.related]
        assert "3" not in ids
        assert ids == ["2", "4"]
        assert [r.score for r in result.related] == [1.0, 1.0]

    @pytest.mark.asyncio
    async def test_keeps_one_extra_result_by_default(self, pipeline, indexed):
        engine = SuggestionEngine(pipeline, indexed)
        # Query near "1" but not identical to any indexed summary: nothing is
        # filtered, so limit + 1 results come back.
        indexed.embedder.fixed["summary: doc 0"] = [0.0, 0.0]
        result = await engine.suggest(Document(id="0", content="doc 0"), limit=2)
        assert [r.source_document_id for r in result.related] == ["1", "2", "3"]

    @pytest.mark.asyncio
    async def test_strict_limit(self, pipeline, indexed):
        engine = SuggestionEngine(pipeline, indexed, strict_limit=True)
        indexed.embedder.fixed["summary: doc 0"] = [0.0, 0.0]
        result = await engine.suggest(Document(id="0", content="doc 0"), limit=2)
        assert [r.source_document_id for r in result.related] == ["1", "2"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [0, 1, 2, 4, 10])
    async def test_self_never_returned(self, pipeline, indexed, limit: int):
        engine = SuggestionEngine(pipeline, indexed)
        result = await engine.suggest(Document(id="1", content="doc 1"), limit=limit)
        assert all(r.source_document_id != "1" for r in result.related)
        assert len(result.related) <= limit + 1
        scores = [r.score for r in result.related]
        assert scores == sorted(scores)

    @pytest.mark.asyncio
    async def test_negative_limit_rejected(self, pipeline, indexed):
        with pytest.raises(ValueError):
            await SuggestionEngine(pipeline, indexed).suggest(Document(id="1", content="doc 1"), limit=-1)

    @pytest.mark.asyncio
    async def test_uses_cached_summary(self, pipeline, indexed, mock_llm: MockLLMClient):
        calls_after_indexing = mock_llm.call_count
        await SuggestionEngine(pipeline, indexed).suggest(Document(id="2", content="doc 2"), limit=1)
        assert mock_llm.call_count == calls_after_indexing

    @pytest.mark.asyncio
    async def test_unindexed_document_gets_summary_cached(self, pipeline, indexed, mock_llm):
        doc = Document(id="new", content="brand new")
        await SuggestionEngine(pipeline, indexed).suggest(doc, limit=1)
        assert await pipeline.summaries.get("new") == "summary: brand new"
        assert pipeline.fingerprints.is_fresh(doc)

    @pytest.mark.asyncio
    async def test_empty_index_raises(self, pipeline, faiss_store: FaissVectorStore):
        engine = SuggestionEngine(pipeline, faiss_store)
        with pytest.raises(IndexNotInitializedError):
            await engine.suggest(Document(id="1", content="x"))
