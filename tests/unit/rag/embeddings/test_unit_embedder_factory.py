# tests/unit/rag/embeddings/test_unit_embedder_factory.py — v2
"""Tests for rag.embeddings.embedder_factory."""

from __future__ import annotations

import pytest

from readnext.config.settings import Settings
from readnext.rag.embeddings.embedder_factory import (
    UnsupportedEmbeddingProviderError,
    create_embedder,
    register_embedding_provider,
)
from readnext.rag.embeddings.ollama_embedder import OllamaEmbedder
from readnext.rag.embeddings.openai_embedder import OpenAIEmbedder


class TestCreateEmbedder:
    def test_default_openai(self):
        embedder = create_embedder()
        assert isinstance(embedder, OpenAIEmbedder)
        assert embedder.model_name == "text-embedding-ada-002"

    def test_openai_from_settings(self):
        settings = Settings(_env_file=None, embedding_model="text-embedding-3-small")
        embedder = create_embedder(settings)
        assert isinstance(embedder, OpenAIEmbedder)
        assert embedder.model_name == "text-embedding-3-small"

    def test_ollama_from_settings(self):
        settings = Settings(
            _env_file=None,
            embedding_provider="ollama",
            embedding_ollama_model="mxbai-embed-large",
            embedding_dimensions=1024,
        )
        embedder = create_embedder(settings)
        assert isinstance(embedder, OllamaEmbedder)
        assert embedder.model_name == "mxbai-embed-large"
        assert embedder.dimensions == 1024

    def test_unsupported_provider(self):
        settings = Settings(_env_file=None, embedding_provider="nope")
        with pytest.raises(UnsupportedEmbeddingProviderError, match="nope"):
            create_embedder(settings)

    def test_register_custom_provider(self):
        register_embedding_provider(
            "custom", "readnext.rag.embeddings.openai_embedder.OpenAIEmbedder",
        )
        settings = Settings(_env_file=None, embedding_provider="custom")
        embedder = create_embedder(settings)
        assert isinstance(embedder, OpenAIEmbedder)


class TestDimensions:
    def test_known_model_overrides_configured(self, caplog):
        settings = Settings(
            _env_file=None,
            embedding_provider="ollama",
            embedding_ollama_model="nomic-embed-text",
            embedding_dimensions=1536,
        )
        with caplog.at_level("WARNING"):
            embedder = create_embedder(settings)
        assert embedder.dimensions == 768
        assert "does not match nomic-embed-text" in caplog.text

    def test_unknown_model_keeps_configured(self):
        settings = Settings(
            _env_file=None,
            embedding_provider="ollama",
            embedding_ollama_model="in-house-embed",
            embedding_dimensions=512,
        )
        assert create_embedder(settings).dimensions == 512
