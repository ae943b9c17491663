# src/cache/base_cache_store.py — v3
"""Abstract summary cache interface.

An artifact cache only stores and returns summaries. Whether a stored
summary is still valid is decided by the fingerprint store.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class BaseArtifactCache(ABC):
    """Unified interface for summary storage backends."""

    @abstractmethod
    async def get(self, document_id: str) -> str | None:
        """Return the stored summary for a document, or None."""

    @abstractmethod
    async def put(self, document_id: str, summary: str) -> None:
        """Store or overwrite the summary for a document."""

    @abstractmethod
    async def list_keys(self) -> list[str]:
        """List storage keys of all stored summaries."""
