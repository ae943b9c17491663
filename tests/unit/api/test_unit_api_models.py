# tests/unit/api/test_unit_api_models.py — v2
"""Tests for api.models — IndexResult and BatchIndexingError."""

from __future__ import annotations

import pytest

from readnext.api.models import BatchIndexingError, IndexResult
from readnext.batch.models import DocumentOutcome


def _outcomes() -> list[DocumentOutcome]:
    return [
        DocumentOutcome(position=0, document_id="a", status="succeeded", value=1),
        DocumentOutcome(position=1, document_id="b", status="failed", error=KeyError("b")),
        DocumentOutcome(position=2, document_id="c", status="skipped"),
    ]


class TestIndexResult:
    def test_partitions(self):
        result = IndexResult(outcomes=_outcomes())
        assert [o.document_id for o in result.failures] == ["b"]
        assert [o.document_id for o in result.skipped] == ["c"]
        assert not result.ok

    def test_all_ok(self):
        result = IndexResult(outcomes=_outcomes()[:1])
        assert result.ok
        result.raise_for_failures()

    def test_raise_for_failures(self):
        with pytest.raises(BatchIndexingError) as exc_info:
            IndexResult(outcomes=_outcomes()).raise_for_failures()
        assert exc_info.value.failures[0].document_id == "b"
        assert isinstance(exc_info.value.__cause__, KeyError)


class TestBatchIndexingError:
    def test_message_truncates_ids(self):
        failures = [
            DocumentOutcome(position=i, document_id=str(i), status="failed", error=ValueError())
            for i in range(7)
        ]
        message = str(BatchIndexingError(failures))
        assert message.startswith("7 document(s) failed to index: 0, 1, 2, 3, 4")
        assert "(+2 more)" in message
