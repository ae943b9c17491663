# src/rag/vector_store/base_vector_store.py — v2
"""Abstract vector store interface.

A vector store owns its embedder: callers hand it summary documents and
query text, never raw vectors. Entries are keyed by source document id and
adding an id that already exists is the caller's responsibility to avoid
(delete first).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING

from readnext.core.models import SummaryDocument
from readnext.rag.models import SearchResult

if TYPE_CHECKING:
    from readnext.rag.embeddings.base_embedder import BaseEmbedder


class IndexNotInitializedError(RuntimeError):
    """Raised when searching a vector store that has no entries yet."""


class VectorEntryNotFoundError(KeyError):
    """Raised when deleting ids that are not in the store."""

    def __init__(self, ids: list[str]):
        self.ids = ids
        super().__init__(f"Ids not found in vector store: {', '.join(ids)}")


class BaseVectorStore(ABC):
    """Unified interface for vector store backends."""

    @property
    @abstractmethod
    def embedder(self) -> BaseEmbedder:
        """Embedder used for both documents and queries."""

    @abstractmethod
    async def add_documents(
        self, documents: list[SummaryDocument], ids: list[str]
    ) -> None:
        """Embed and add documents under the given ids."""

    @abstractmethod
    async def delete(self, ids: list[str]) -> None:
        """Delete entries by id.

        Raises:
            VectorEntryNotFoundError: If a backend reports missing ids.
        """

    @abstractmethod
    async def similarity_search_with_score(
        self, query: str, k: int = 4
    ) -> list[SearchResult]:
        """Return up to k nearest entries, ascending by score.

        Raises:
            IndexNotInitializedError: If the store is empty.
        """

    @abstractmethod
    async def count(self) -> int:
        """Number of entries in the store."""

    @property
    def supports_persistence(self) -> bool:
        """Whether save() writes the store to a directory."""
        return False

    async def save(self, directory: Path | str) -> None:
        """Persist the store under directory."""
        raise NotImplementedError(f"{self.provider_name} does not support save()")

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Provider identifier (faiss, chromadb)."""
