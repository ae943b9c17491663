# tests/unit/logging/test_unit_context.py — v2
"""Tests for logging.context — task-local logging context."""

from __future__ import annotations

import asyncio

import pytest

from readnext.logging.context import (
    clear_context,
    get_context,
    set_document_context,
    set_operation_context,
)


class TestContext:
    def setup_method(self):
        clear_context()

    def teardown_method(self):
        clear_context()

    def test_empty(self):
        assert get_context().as_dict() == {}

    def test_set_document(self):
        set_document_context("a", "index")
        assert get_context().as_dict() == {"document_id": "a", "operation": "index"}

    def test_document_keeps_operation(self):
        set_operation_context("suggest")
        set_document_context("a")
        assert get_context().operation == "suggest"

    @pytest.mark.asyncio
    async def test_task_local(self):
        async def worker(document_id: str) -> str | None:
            set_document_context(document_id)
            await asyncio.sleep(0)
            return get_context().document_id

        results = await asyncio.gather(worker("a"), worker("b"))
        assert results == ["a", "b"]
        assert get_context().document_id is None
