# src/rag/vector_store/vector_store_factory.py — v2
"""Factory: instantiate vector store from configuration.

The faiss store is loaded from the cache directory when a previous save
exists there, otherwise a new empty store is created.
"""

from __future__ import annotations

import logging
from pathlib import Path
from urllib.parse import urlparse

from readnext.config.settings import Settings
from readnext.rag.embeddings.base_embedder import BaseEmbedder
from readnext.rag.vector_store.base_vector_store import BaseVectorStore

logger = logging.getLogger(__name__)


class UnsupportedVectorStoreError(ValueError):
    """Raised when a vector store type is not supported."""


def create_vector_store(
    settings: Settings,
    embedder: BaseEmbedder,
    cache_dir: Path | str,
) -> BaseVectorStore:
    """Instantiate the configured vector store.

    Args:
        settings: Application settings (VECTOR_DB_TYPE and friends).
        embedder: Embedder the store uses for documents and queries.
        cache_dir: Cache root; default location for persisted indexes.

    Returns:
        Configured BaseVectorStore instance.

    Raises:
        UnsupportedVectorStoreError: If type is not supported.
    """
    db_type = settings.vector_db_type
    store_dir = Path(settings.vector_db_path or cache_dir).expanduser()

    if db_type == "faiss":
        from readnext.rag.vector_store.faiss_store import FaissVectorStore

        if FaissVectorStore.exists(store_dir):
            return FaissVectorStore.load(store_dir, embedder)
        logger.debug("No saved index in %s, starting empty", store_dir)
        return FaissVectorStore(embedder)

    if db_type == "chromadb":
        from readnext.rag.vector_store.chromadb_store import ChromaDBStore

        url = settings.vector_db_url
        if url:
            parsed = urlparse(url)
            return ChromaDBStore(
                embedder,
                collection=settings.vector_db_collection,
                host=parsed.hostname,
                port=parsed.port or 8000,
            )
        return ChromaDBStore(
            embedder,
            collection=settings.vector_db_collection,
            persist_path=store_dir / "chroma",
        )

    raise UnsupportedVectorStoreError(
        f"Unsupported vector store type: {db_type!r}. Available: faiss, chromadb"
    )
