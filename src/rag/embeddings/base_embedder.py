# src/rag/embeddings/base_embedder.py — v2
"""Abstract embeddings interface.

Vector stores embed summaries through embed_summaries(), which checks the
provider returned one vector per summary before anything is stored.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from readnext.core.models import SummaryDocument


class EmbeddingMismatchError(RuntimeError):
    """Raised when a provider returns the wrong number of vectors."""


class BaseEmbedder(ABC):
    """Turns summaries and queries into vectors for one embedding model."""

    @abstractmethod
    async def embed_texts(self, texts: list[str]) -> list[list[float]]:
        """Embed texts, one vector per text, in order."""

    @abstractmethod
    async def embed_query(self, query: str) -> list[float]:
        """Embed the summary of a query document."""

    async def embed_summaries(
        self, documents: list[SummaryDocument]
    ) -> list[list[float]]:
        """Embed summary documents by content.

        Raises:
            EmbeddingMismatchError: If the vector count differs from the
                document count.
        """
        vectors = await self.embed_texts([d.content for d in documents])
        if len(vectors) != len(documents):
            raise EmbeddingMismatchError(
                f"{self.provider_name}/{self.model_name} returned {len(vectors)} "
                f"vectors for {len(documents)} summaries"
            )
        return vectors

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Configured vector size."""

    @property
    @abstractmethod
    def provider_name(self) -> str: ...

    @property
    @abstractmethod
    def model_name(self) -> str: ...
