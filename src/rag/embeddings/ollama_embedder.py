# src/rag/embeddings/ollama_embedder.py — v2
"""Ollama embedding adapter (local inference).

Uses the ollama Python SDK's embed endpoint.
Models: nomic-embed-text, mxbai-embed-large, etc.
"""

from __future__ import annotations

import logging

from readnext.rag.embeddings.base_embedder import BaseEmbedder

logger = logging.getLogger(__name__)


class OllamaEmbedder(BaseEmbedder):
    """Local embeddings via Ollama."""

    def __init__(
        self,
        model: str = "nomic-embed-text",
        base_url: str = "http://localhost:11434",
        dimensions: int = 768,
    ) -> None:
        self._model_name = model
        self._base_url = base_url.rstrip("/")
        self._dimensions = dimensions
        self.__client = None

    @property
    def _client(self):
        if self.__client is None:
            try:
                import ollama
            except ImportError as e:
                raise ImportError("ollama package required: pip install ollama") from e
            self.__client = ollama.AsyncClient(host=self._base_url)
        return self.__client

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Embed document texts in one request."""
        if not texts:
            return []
        response = await self._client.embed(model=self._model_name, input=texts)
        embeddings = list(response["embeddings"])
        if len(embeddings) != len(texts):
            raise RuntimeError(
                f"Ollama returned {len(embeddings)} embeddings for {len(texts)} texts "
                f"(model {self._model_name})"
            )
        return [list(e) for e in embeddings]

    async def embed_query(self, query: str) -> list[float]:
        """Embed a single query."""
        result = await self.embed_texts([query])
        return result[0]

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def provider_name(self) -> str:
        return "ollama"

    @property
    def model_name(self) -> str:
        return self._model_name
