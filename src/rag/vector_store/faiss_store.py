# src/rag/vector_store/faiss_store.py — v1
"""In-process vector store backed by a FAISS flat-L2 index.

Exact search, suitable for the few thousand articles of a typical site.
Scores are squared L2 distances: 0 for an identical vector, lower is more
similar. save() writes two files into the cache directory:
  faiss.index           the IndexFlatL2 (row i belongs to ids[i])
  faiss_docstore.json   ids, summaries and metadata
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import numpy as np

from readnext.core.models import SummaryDocument
from readnext.rag.models import SearchResult
from readnext.rag.vector_store.base_vector_store import (
    BaseVectorStore,
    IndexNotInitializedError,
    VectorEntryNotFoundError,
)

if TYPE_CHECKING:
    from readnext.rag.embeddings.base_embedder import BaseEmbedder

logger = logging.getLogger(__name__)

INDEX_FILENAME = "faiss.index"
DOCSTORE_FILENAME = "faiss_docstore.json"


def _import_faiss():
    try:
        import faiss
    except ImportError:
        raise ImportError(
            "faiss is required for the faiss vector store. "
            "Install with: pip install faiss-cpu"
        )
    return faiss


class FaissVectorStore(BaseVectorStore):
    """Vector store held in a FAISS index, optionally saved to a directory.

    The index is created on the first add; its dimension is taken from the
    first batch of vectors.
    """

    def __init__(self, embedder: BaseEmbedder) -> None:
        self._faiss = _import_faiss()
        self._embedder = embedder
        self._index: Any = None  # faiss.IndexFlatL2
        self._ids: list[str] = []
        self._contents: list[str] = []
        self._metadatas: list[dict[str, Any]] = []

    @property
    def embedder(self) -> BaseEmbedder:
        return self._embedder

    async def add_documents(
        self, documents: list[SummaryDocument], ids: list[str]
    ) -> None:
        """Embed and add documents. An id that already exists is replaced."""
        if len(documents) != len(ids):
            raise ValueError(
                f"Got {len(documents)} documents but {len(ids)} ids"
            )
        if not documents:
            return
        vectors = await self._embedder.embed_summaries(documents)
        rows = self._as_rows(vectors)

        self._drop([i for i in ids if i in self._ids])
        if self._index is None:
            self._index = self._faiss.IndexFlatL2(rows.shape[1])
            logger.debug("Initialized FAISS index (dim=%d)", rows.shape[1])
        self._index.add(rows)
        self._ids.extend(ids)
        self._contents.extend(d.content for d in documents)
        self._metadatas.extend(dict(d.metadata) for d in documents)

    async def delete(self, ids: list[str]) -> None:
        """Delete entries by id.

        Raises:
            VectorEntryNotFoundError: If any id is unknown. Nothing is
                deleted in that case.
        """
        missing = [i for i in ids if i not in self._ids]
        if missing:
            raise VectorEntryNotFoundError(missing)
        self._drop(ids)

    async def similarity_search_with_score(
        self, query: str, k: int = 4
    ) -> list[SearchResult]:
        if self._index is None or self._index.ntotal == 0:
            raise IndexNotInitializedError(
                "Vector store has no entries; index documents before searching"
            )
        if k <= 0:
            return []
        query_vector = self._as_rows([await self._embedder.embed_query(query)])
        distances, indices = self._index.search(query_vector, min(k, self._index.ntotal))

        # FAISS does not order equal distances; keep insertion order for ties.
        hits = sorted(
            (float(distance), int(row))
            for distance, row in zip(distances[0], indices[0])
            if row >= 0
        )
        return [
            SearchResult(
                id=self._ids[row],
                content=self._contents[row],
                score=distance,
                metadata=dict(self._metadatas[row]),
            )
            for distance, row in hits
        ]

    async def count(self) -> int:
        return len(self._ids)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._ids

    @property
    def supports_persistence(self) -> bool:
        return True

    async def save(self, directory: Path | str) -> None:
        """Write the store to directory, replacing any previous save.

        Raises:
            IndexNotInitializedError: If there is nothing to save.
        """
        if self._index is None or not self._ids:
            raise IndexNotInitializedError("Cannot save an empty vector store")
        docstore = {
            "ids": list(self._ids),
            "contents": list(self._contents),
            "metadatas": [dict(m) for m in self._metadatas],
            "dimensions": int(self._index.d),
            "embedder": self._embedder.model_name,
        }
        index = self._faiss.clone_index(self._index)
        await asyncio.to_thread(self._write, Path(directory), index, docstore)

    @classmethod
    def exists(cls, directory: Path | str) -> bool:
        root = Path(directory)
        return (root / INDEX_FILENAME).exists() and (root / DOCSTORE_FILENAME).exists()

    @classmethod
    def saved_size(cls, directory: Path | str) -> int | None:
        """Number of entries in a saved index, or None if there is none."""
        if not cls.exists(directory):
            return None
        docstore = json.loads((Path(directory) / DOCSTORE_FILENAME).read_text(encoding="utf-8"))
        return len(docstore["ids"])

    @classmethod
    def load(cls, directory: Path | str, embedder: BaseEmbedder) -> FaissVectorStore:
        """Load a store previously written by save().

        Raises:
            ValueError: If the saved files are inconsistent.
        """
        root = Path(directory)
        store = cls(embedder)
        docstore = json.loads((root / DOCSTORE_FILENAME).read_text(encoding="utf-8"))
        index = store._faiss.read_index(str(root / INDEX_FILENAME))
        ids = docstore["ids"]
        if index.ntotal != len(ids):
            raise ValueError(
                f"Saved index at {root} has {len(ids)} ids but {index.ntotal} vectors"
            )
        if docstore.get("embedder") and docstore["embedder"] != embedder.model_name:
            logger.warning(
                "Index at %s was built with %s, loading with %s",
                root, docstore["embedder"], embedder.model_name,
            )
        store._index = index if ids else None
        store._ids = list(ids)
        store._contents = list(docstore["contents"])
        store._metadatas = [dict(m) for m in docstore["metadatas"]]
        logger.info("Loaded %d vectors from %s", len(ids), root)
        return store

    @property
    def provider_name(self) -> str:
        return "faiss"

    def _as_rows(self, vectors: list[list[float]]) -> np.ndarray:
        rows = np.asarray(vectors, dtype="float32")
        if rows.ndim != 2:
            raise ValueError("Vectors must all have the same length")
        if self._index is not None and rows.shape[1] != self._index.d:
            raise ValueError(
                f"Expected {self._index.d}-dimensional vectors, got {rows.shape[1]}"
            )
        return rows

    def _drop(self, ids: list[str]) -> None:
        """Remove ids by rebuilding the index from the rows that stay."""
        if not ids:
            return
        doomed = set(ids)
        keep = [row for row, i in enumerate(self._ids) if i not in doomed]
        self._ids = [self._ids[row] for row in keep]
        self._contents = [self._contents[row] for row in keep]
        self._metadatas = [self._metadatas[row] for row in keep]
        if self._index is None:
            return
        if not keep:
            self._index = None
            return
        vectors = self._index.reconstruct_n(0, self._index.ntotal)
        rebuilt = self._faiss.IndexFlatL2(self._index.d)
        rebuilt.add(np.ascontiguousarray(vectors[keep]))
        self._index = rebuilt

    def _write(self, root: Path, index: Any, docstore: dict[str, Any]) -> None:
        root.mkdir(parents=True, exist_ok=True)
        index_path = root / INDEX_FILENAME
        docstore_path = root / DOCSTORE_FILENAME
        tmp_index = index_path.with_name(f"{index_path.name}.tmp")
        tmp_docstore = docstore_path.with_name(f"{docstore_path.name}.tmp")
        self._faiss.write_index(index, str(tmp_index))
        tmp_docstore.write_text(json.dumps(docstore), encoding="utf-8")
        os.replace(tmp_index, index_path)
        os.replace(tmp_docstore, docstore_path)
