# src/cache/json_store.py — v2
"""JSON file-backed fingerprint store.

Keeps the document id to content fingerprint table in memory and rewrites
it as a whole to CACHE_DIR/contentHashes.json on persist(). Persisting is
explicit so callers choose their durability granularity.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from readnext.cache.fingerprint import document_fingerprint
from readnext.cache.models import FingerprintTable
from readnext.core.models import Document

FINGERPRINT_FILENAME = "contentHashes.json"

_NO_ID_WARNING = "No id supplied, so caching will not work"


class JsonFingerprintStore:
    """Content-address store answering "is the cached summary still valid?".

    Args:
        cache_dir: Directory holding contentHashes.json.
        logger: Logger to report cache problems to.
    """

    def __init__(self, cache_dir: Path | str, logger: logging.Logger | None = None) -> None:
        self._dir = Path(cache_dir).expanduser()
        self._path = self._dir / FINGERPRINT_FILENAME
        self._logger = logger or logging.getLogger(__name__)
        self._records: dict[str, str] = {}
        self._write_lock = asyncio.Lock()
        self.load()

    @property
    def path(self) -> Path:
        return self._path

    def is_fresh(self, document: Document) -> bool:
        """True when the stored fingerprint matches the document's content."""
        if not document.id:
            self._logger.warning(_NO_ID_WARNING)
            return False
        return self._records.get(document.id) == document_fingerprint(document)

    def record(self, document: Document) -> None:
        """Store the document's current fingerprint under its id."""
        if not document.id:
            self._logger.warning(_NO_ID_WARNING)
            return
        self._records[document.id] = document_fingerprint(document)

    def forget(self, document_id: str) -> bool:
        """Drop the fingerprint for an id. Returns True if one was stored."""
        return self._records.pop(document_id, None) is not None

    def get(self, document_id: str) -> str | None:
        return self._records.get(document_id)

    def __contains__(self, document_id: object) -> bool:
        return document_id in self._records

    def __len__(self) -> int:
        return len(self._records)

    def load(self) -> bool:
        """Load the table from disk.

        A missing file leaves the table empty. A malformed file is logged
        and the table is reset to empty; the store stays usable.

        Returns:
            False if the file existed but could not be parsed.
        """
        if not self._path.exists():
            return True
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            self._records = FingerprintTable.model_validate(data).root
        except (OSError, ValueError, ValidationError) as e:
            self._logger.error("Error loading content hashes from %s: %s", self._path, e)
            self._records = {}
            return False
        return True

    async def persist(self) -> None:
        """Rewrite the whole table to disk.

        Writers are serialized so two concurrent persists cannot interleave
        and drop each other's keys. The file is replaced atomically.
        """
        async with self._write_lock:
            payload = json.dumps(self._records, indent=2, sort_keys=True)
            await asyncio.to_thread(self._write, payload)

    def _write(self, payload: str) -> None:
        self._dir.mkdir(parents=True, exist_ok=True)
        tmp_path = self._path.with_name(f"{self._path.name}.{os.getpid()}.tmp")
        tmp_path.write_text(payload, encoding="utf-8")
        os.replace(tmp_path, self._path)
