# src/cache/file_store.py — v2
"""Plain-text file summary cache.

Stores one file per document under CACHE_DIR/summaries/, named by
storage_key(document_id), so a single summary can be read without
touching the others. File I/O runs in a worker thread and writes go
through a temp file renamed into place.
"""

from __future__ import annotations

import asyncio
import logging
import os
from pathlib import Path

from readnext.cache.base_cache_store import BaseArtifactCache
from readnext.cache.fingerprint import storage_key

SUMMARIES_DIRNAME = "summaries"


class FileArtifactCache(BaseArtifactCache):
    """File-based summary cache."""

    def __init__(self, cache_dir: Path | str, logger: logging.Logger | None = None) -> None:
        self._root = Path(cache_dir).expanduser() / SUMMARIES_DIRNAME
        self._logger = logger or logging.getLogger(__name__)

    @property
    def root(self) -> Path:
        return self._root

    async def get(self, document_id: str) -> str | None:
        """Read the stored summary, if any. Presence says nothing about freshness."""
        return await asyncio.to_thread(self._read, self._entry_path(document_id))

    async def put(self, document_id: str, summary: str) -> None:
        """Write or overwrite the summary for a document."""
        path = self._entry_path(document_id)
        await asyncio.to_thread(self._write, path, summary)
        self._logger.debug("Wrote summary for %s to %s", document_id, path)

    async def list_keys(self) -> list[str]:
        if not self._root.is_dir():
            return []
        # Storage keys never start with "."; those are unfinished temp files
        return sorted(
            p.name for p in self._root.iterdir()
            if p.is_file() and not p.name.startswith(".")
        )

    def _entry_path(self, document_id: str) -> Path:
        """Return file path for a document id."""
        return self._root / storage_key(document_id)

    @staticmethod
    def _read(path: Path) -> str | None:
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    @staticmethod
    def _write(path: Path, summary: str) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = path.with_name(f".{path.name}.{os.getpid()}.tmp")
        tmp_path.write_text(summary, encoding="utf-8")
        os.replace(tmp_path, path)
