# src/rag/vector_store/chromadb_store.py — v2
"""ChromaDB vector store adapter.

Uses the chromadb SDK for local (persistent) or remote storage. Chroma
persists on every write, so save() is not needed. Embeddings are computed
by our embedder and passed in explicitly; Chroma's own embedding function
is never used. Distances are returned as-is (lower is more similar).
Requires: pip install chromadb.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from readnext.core.models import SummaryDocument
from readnext.rag.models import SearchResult
from readnext.rag.vector_store.base_vector_store import (
    BaseVectorStore,
    IndexNotInitializedError,
)

if TYPE_CHECKING:
    from readnext.rag.embeddings.base_embedder import BaseEmbedder

logger = logging.getLogger(__name__)


class ChromaDBStore(BaseVectorStore):
    """Vector store backed by a single ChromaDB collection."""

    def __init__(
        self,
        embedder: BaseEmbedder,
        collection: str = "read-next",
        persist_path: str | Path | None = None,
        host: str | None = None,
        port: int = 8000,
    ) -> None:
        try:
            import chromadb
        except ImportError as e:
            raise ImportError(
                "chromadb package required: pip install chromadb"
            ) from e

        if host:
            self._client = chromadb.HttpClient(host=host, port=port)
        elif persist_path:
            self._client = chromadb.PersistentClient(path=str(persist_path))
        else:
            self._client = chromadb.Client()
        self._embedder = embedder
        self._collection_name = collection
        self._collection = self._client.get_or_create_collection(
            collection, metadata={"hnsw:space": "l2"}
        )

    @property
    def embedder(self) -> BaseEmbedder:
        return self._embedder

    async def add_documents(
        self, documents: list[SummaryDocument], ids: list[str]
    ) -> None:
        """Embed and upsert documents."""
        if not documents:
            return
        embeddings = await self._embedder.embed_summaries(documents)
        self._collection.upsert(
            ids=ids,
            embeddings=embeddings,
            documents=[d.content for d in documents],
            metadatas=[d.metadata for d in documents],
        )

    async def delete(self, ids: list[str]) -> None:
        """Delete vectors by ID. Unknown ids are ignored by Chroma."""
        self._collection.delete(ids=ids)

    async def similarity_search_with_score(
        self, query: str, k: int = 4
    ) -> list[SearchResult]:
        """Query by embedding distance."""
        if self._collection.count() == 0:
            raise IndexNotInitializedError(
                f"Chroma collection {self._collection_name!r} is empty"
            )
        query_embedding = await self._embedder.embed_query(query)
        results = self._collection.query(
            query_embeddings=[query_embedding],
            n_results=k,
            include=["documents", "metadatas", "distances"],
        )

        search_results: list[SearchResult] = []
        if results["ids"] and results["ids"][0]:
            for i, doc_id in enumerate(results["ids"][0]):
                distance = results["distances"][0][i] if results["distances"] else 0.0
                doc = results["documents"][0][i] if results["documents"] else ""
                meta = results["metadatas"][0][i] if results["metadatas"] else {}
                search_results.append(
                    SearchResult(
                        id=doc_id,
                        content=doc or "",
                        score=float(distance),
                        metadata=dict(meta or {}),
                    )
                )
        return search_results

    async def count(self) -> int:
        """Return number of vectors in the collection."""
        return self._collection.count()

    @property
    def provider_name(self) -> str:
        return "chromadb"
