# src/cache/fingerprint.py — v3
"""Content fingerprints and storage keys for cached summaries.

A fingerprint is the SHA-256 of the raw document content. It is only ever
compared for equality, so no normalization is applied: any change to the
content, including whitespace, invalidates the cached summary.
"""

from __future__ import annotations

import hashlib
import re

from readnext.core.models import Document

# Ids matching this pattern are used verbatim as file names.
_SAFE_KEY = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,127}$")
_HASHED_KEY_PREFIX = "~"


def compute_fingerprint(content: str) -> str:
    """SHA-256 hex digest of the UTF-8 encoded content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def document_fingerprint(document: Document) -> str:
    """Fingerprint of a document's content."""
    return compute_fingerprint(document.content)


def storage_key(document_id: str) -> str:
    """Map a document id to a file name that stays inside its directory.

    Plain ids (letters, digits, '.', '_', '-', no leading dot) are kept as-is
    so the cache stays browsable. Anything else, including ids with path
    separators, is replaced by '~' followed by the SHA-256 of the id. The
    '~' prefix can never collide with a plain id.
    """
    if _SAFE_KEY.match(document_id):
        return document_id
    digest = hashlib.sha256(document_id.encode("utf-8")).hexdigest()
    return f"{_HASHED_KEY_PREFIX}{digest}"
