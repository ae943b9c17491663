# src/rag/embeddings/embedder_factory.py — v3
"""Factory: instantiate embedding provider from configuration.

A saved index only stays searchable with the model that built it, so the
configured dimensions are checked against the known size of the model.
"""

from __future__ import annotations

import importlib
import logging
from typing import Any

from readnext.config.settings import Settings
from readnext.rag.embeddings.base_embedder import BaseEmbedder

logger = logging.getLogger(__name__)

_PROVIDER_REGISTRY: dict[str, str] = {
    "openai": "readnext.rag.embeddings.openai_embedder.OpenAIEmbedder",
    "ollama": "readnext.rag.embeddings.ollama_embedder.OllamaEmbedder",
}

# Native output size of common models
KNOWN_DIMENSIONS: dict[str, int] = {
    "text-embedding-ada-002": 1536,
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
    "nomic-embed-text": 768,
    "mxbai-embed-large": 1024,
    "all-minilm": 384,
}


class UnsupportedEmbeddingProviderError(ValueError):
    """Raised when an embedding provider is not registered."""


def create_embedder(settings: Settings | None = None) -> BaseEmbedder:
    """Instantiate the configured embedding provider.

    Args:
        settings: Application settings (EMBEDDING_PROVIDER and friends).
            Defaults to OpenAI text-embedding-ada-002.

    Returns:
        Configured BaseEmbedder instance.
    """
    settings = settings or Settings(_env_file=None)
    provider = settings.embedding_provider
    if provider not in _PROVIDER_REGISTRY:
        raise UnsupportedEmbeddingProviderError(
            f"Unsupported embedding provider: {provider!r}. "
            f"Available: {', '.join(sorted(_PROVIDER_REGISTRY))}"
        )

    kwargs = _provider_kwargs(provider, settings)
    kwargs["dimensions"] = _dimensions_for(kwargs.get("model"), settings.embedding_dimensions)

    logger.debug(
        "Creating embedder: provider=%s, model=%s", provider, kwargs.get("model"),
    )
    return _import_class(_PROVIDER_REGISTRY[provider])(**kwargs)


def register_embedding_provider(name: str, class_path: str) -> None:
    """Register a custom embedding provider (fully qualified class path)."""
    _PROVIDER_REGISTRY[name] = class_path


def _provider_kwargs(provider: str, settings: Settings) -> dict[str, Any]:
    if provider == "openai":
        return {"model": settings.embedding_model, "api_key": settings.openai_api_key}
    if provider == "ollama":
        return {"model": settings.embedding_ollama_model, "base_url": settings.ollama_base_url}
    return {"model": settings.embedding_model}


def _dimensions_for(model: str | None, configured: int) -> int:
    """Prefer the model's native size when it disagrees with configuration."""
    known = KNOWN_DIMENSIONS.get(model or "")
    if known is not None and known != configured:
        logger.warning(
            "EMBEDDING_DIMENSIONS=%d does not match %s (%d); using %d",
            configured, model, known, known,
        )
        return known
    return configured


def _import_class(class_path: str) -> type:
    """Dynamically import a class from its fully qualified path."""
    module_path, class_name = class_path.rsplit(".", 1)
    module = importlib.import_module(module_path)
    return getattr(module, class_name)
