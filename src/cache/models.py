# src/cache/models.py — v2
"""Cache domain models: FingerprintTable.

The table is persisted as a flat JSON object of document id to hex digest.
"""

from __future__ import annotations

from pydantic import Field, RootModel


class FingerprintTable(RootModel[dict[str, str]]):
    """Persisted document id to content fingerprint mapping."""

    root: dict[str, str] = Field(default_factory=dict)
