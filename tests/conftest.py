# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides a recording mock LLM client, a deterministic embedder, sample
documents and temp cache directories. No external dependencies: every
model call is faked.
"""

from __future__ import annotations

import asyncio
import hashlib
import math
from pathlib import Path

import pytest

from readnext.cache.file_store import FileArtifactCache
from readnext.cache.json_store import JsonFingerprintStore
from readnext.core.models import Document
from readnext.llm.base_client import BaseLLMClient
from readnext.llm.models import LLMResponse, Message
from readnext.pipeline.document_pipeline import SummaryPipeline
from readnext.pipeline.summarizer import Summarizer
from readnext.rag.embeddings.base_embedder import BaseEmbedder
from readnext.rag.vector_store.faiss_store import FaissVectorStore


# === MOCKS ===


class MockLLMClient(BaseLLMClient):
    """Chat client that echoes a summary of the user message.

    Records every call and the peak number of calls in flight. An optional
    delay makes each call a real suspension point, and `fail_on` makes
    calls whose content contains that marker raise RuntimeError.
    """

    def __init__(self, delay: float = 0.0, fail_on: str | None = None) -> None:
        self.delay = delay
        self.fail_on = fail_on
        self.calls: list[tuple[str | None, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def call_count(self) -> int:
        return len(self.calls)

    async def complete(
        self,
        messages: list[Message],
        system: str | None = None,
        max_tokens: int = 4096,
        temperature: float = 0.0,
    ) -> LLMResponse:
        content = messages[-1].content
        self.calls.append((system, content))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if self.fail_on is not None and self.fail_on in content:
                raise RuntimeError(f"provider error for {content!r}")
        finally:
            self.in_flight -= 1
        return LLMResponse(
            content=f"summary: {content}",
            output_tokens=len(content.split()),
            model="mock-model",
            provider="mock",
        )

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def model_name(self) -> str:
        return "mock-model"


class MockEmbedder(BaseEmbedder):
    """Deterministic embedder for testing: hashes text to produce vectors.

    Texts listed in `fixed` get that exact vector instead, so tests can
    lay out known distances.
    """

    def __init__(self, dimensions: int = 16, fixed: dict[str, list[float]] | None = None):
        self._dims = dimensions
        self.fixed = dict(fixed or {})
        self.call_count = 0

    def _text_to_vec(self, text: str) -> list[float]:
        if text in self.fixed:
            return list(self.fixed[text])
        digest = hashlib.sha256(text.encode()).hexdigest()
        raw = [int(digest[i:i + 2], 16) / 255.0 - 0.5 for i in range(0, self._dims * 2, 2)]
        norm = math.sqrt(sum(x * x for x in raw)) or 1.0
        return [x / norm for x in raw]

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        self.call_count += len(texts)
        return [self._text_to_vec(t) for t in texts]

    async def embed_query(self, query: str) -> list[float]:
        self.call_count += 1
        return self._text_to_vec(query)

    @property
    def dimensions(self) -> int:
        return self._dims

    @property
    def provider_name(self) -> str:
        return "mock"

    @property
    def model_name(self) -> str:
        return "mock-embedder"


# === FIXTURES: Mocks ===


@pytest.fixture
def mock_llm() -> MockLLMClient:
    return MockLLMClient()


@pytest.fixture
def mock_embedder() -> MockEmbedder:
    return MockEmbedder()


@pytest.fixture
def faiss_store(mock_embedder: MockEmbedder) -> FaissVectorStore:
    return FaissVectorStore(mock_embedder)


# === FIXTURES: Sample data ===


@pytest.fixture
def sample_document() -> Document:
    return Document(id="1", content="hello world")


@pytest.fixture
def sample_corpus() -> list[Document]:
    """Five small documents with ids 1..5."""
    return [
        Document(id=str(i), content=f"article number {i} about topic {i % 2}")
        for i in range(1, 6)
    ]


# === FIXTURES: Cache and pipeline ===


@pytest.fixture
def tmp_cache_dir(tmp_path: Path) -> Path:
    cache = tmp_path / "cache"
    cache.mkdir()
    return cache


@pytest.fixture
def fingerprint_store(tmp_cache_dir: Path) -> JsonFingerprintStore:
    return JsonFingerprintStore(tmp_cache_dir)


@pytest.fixture
def summary_cache(tmp_cache_dir: Path) -> FileArtifactCache:
    return FileArtifactCache(tmp_cache_dir)


@pytest.fixture
def summarizer(mock_llm: MockLLMClient) -> Summarizer:
    return Summarizer(mock_llm, prompt="Summarize this article.")


@pytest.fixture
def pipeline(
    summarizer: Summarizer,
    fingerprint_store: JsonFingerprintStore,
    summary_cache: FileArtifactCache,
) -> SummaryPipeline:
    return SummaryPipeline(summarizer, fingerprint_store, summary_cache)
