# src/cache/cache_factory.py — v3
"""Factory for the fingerprint store and summary cache of a cache directory."""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path

from readnext.cache.file_store import FileArtifactCache
from readnext.cache.json_store import JsonFingerprintStore

DEFAULT_CACHE_DIRNAME = "read-next-cache"


def default_cache_dir() -> Path:
    """Cache directory used when none is configured."""
    return Path(tempfile.gettempdir()) / DEFAULT_CACHE_DIRNAME


def create_cache_stores(
    cache_dir: Path | str | None = None,
    logger: logging.Logger | None = None,
) -> tuple[JsonFingerprintStore, FileArtifactCache]:
    """Create the fingerprint store and summary cache rooted at cache_dir.

    Args:
        cache_dir: Cache root. Defaults to <tempdir>/read-next-cache.
        logger: Logger shared by both stores.

    Returns:
        (fingerprint store, summary cache). The directory is created.
    """
    root = Path(cache_dir).expanduser() if cache_dir else default_cache_dir()
    root.mkdir(parents=True, exist_ok=True)
    return JsonFingerprintStore(root, logger=logger), FileArtifactCache(root, logger=logger)
