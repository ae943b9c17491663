# src/api/models.py — v2
"""API-level models: IndexResult and BatchIndexingError.

Document, SummaryDocument and Suggestions live in core.models and are
re-exported here for callers of the facade.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from readnext.batch.models import DocumentOutcome
from readnext.core.models import Document, RelatedDocument, SummaryDocument, Suggestions

__all__ = [
    "BatchIndexingError",
    "Document",
    "IndexResult",
    "RelatedDocument",
    "SummaryDocument",
    "Suggestions",
]


class BatchIndexingError(Exception):
    """Raised by IndexResult.raise_for_failures() when documents failed."""

    def __init__(self, failures: list[DocumentOutcome]):
        self.failures = failures
        ids = ", ".join(str(f.document_id) for f in failures[:5])
        more = f" (+{len(failures) - 5} more)" if len(failures) > 5 else ""
        super().__init__(f"{len(failures)} document(s) failed to index: {ids}{more}")


@dataclass
class IndexResult:
    """Return value of ReadNext.index().

    `documents` holds the summary documents that were produced, in input
    order. Every input has exactly one entry in `outcomes`.
    """

    documents: list[SummaryDocument] = field(default_factory=list)
    outcomes: list[DocumentOutcome] = field(default_factory=list)
    entries_added: int = 0
    saved: bool = False

    @property
    def failures(self) -> list[DocumentOutcome]:
        return [o for o in self.outcomes if o.status == "failed"]

    @property
    def skipped(self) -> list[DocumentOutcome]:
        return [o for o in self.outcomes if o.status == "skipped"]

    @property
    def ok(self) -> bool:
        return all(o.ok for o in self.outcomes)

    def raise_for_failures(self) -> None:
        """Raise BatchIndexingError if any document failed.

        The first failure's exception is chained as the cause.
        """
        failures = self.failures
        if failures:
            raise BatchIndexingError(failures) from failures[0].error
