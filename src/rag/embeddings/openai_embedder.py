# src/rag/embeddings/openai_embedder.py — v3
"""OpenAI embedding adapter.

Models: text-embedding-ada-002 (default), text-embedding-3-small/large.
Large batches are split into requests of at most MAX_BATCH_SIZE inputs.
"""

from __future__ import annotations

import logging

from readnext.rag.embeddings.base_embedder import BaseEmbedder

logger = logging.getLogger(__name__)

# Input limit of a single embeddings request
MAX_BATCH_SIZE = 2048


class OpenAIEmbedder(BaseEmbedder):
    """Embeddings via OpenAI API."""

    def __init__(
        self,
        model: str = "text-embedding-ada-002",
        api_key: str | None = None,
        dimensions: int = 1536,
        batch_size: int = MAX_BATCH_SIZE,
    ) -> None:
        self._model = model
        self._api_key = api_key
        self._dimensions = dimensions
        self._batch_size = max(1, min(batch_size, MAX_BATCH_SIZE))
        self.__client = None

    @property
    def _client(self):
        if self.__client is None:
            try:
                import openai
            except ImportError as e:
                raise ImportError(
                    "openai package required: pip install openai"
                ) from e
            self.__client = openai.AsyncOpenAI(api_key=self._api_key or None)
        return self.__client

    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        vectors: list[list[float]] = []
        for start in range(0, len(texts), self._batch_size):
            batch = texts[start:start + self._batch_size]
            response = await self._client.embeddings.create(
                input=batch, model=self._model
            )
            vectors.extend(item.embedding for item in response.data)
        if len(texts) > self._batch_size:
            logger.debug(
                "Embedded %d texts in %d requests",
                len(texts), -(-len(texts) // self._batch_size),
            )
        return vectors

    async def embed_query(self, query: str) -> list[float]:
        (vector,) = await self.embed_texts([query])
        return vector

    @property
    def dimensions(self) -> int:
        return self._dimensions

    @property
    def provider_name(self) -> str:
        return "openai"

    @property
    def model_name(self) -> str:
        return self._model
