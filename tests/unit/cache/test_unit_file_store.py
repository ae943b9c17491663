# tests/unit/cache/test_unit_file_store.py — v2
"""Tests for cache.file_store — one summary file per document."""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import patch

import pytest

from readnext.cache.file_store import SUMMARIES_DIRNAME, FileArtifactCache
from readnext.cache.fingerprint import storage_key


class TestFileArtifactCache:
    @pytest.mark.asyncio
    async def test_get_missing_returns_none(self, summary_cache: FileArtifactCache):
        assert await summary_cache.get("nope") is None

    @pytest.mark.asyncio
    async def test_put_then_get(self, summary_cache: FileArtifactCache):
        await summary_cache.put("1", "a summary")
        assert await summary_cache.get("1") == "a summary"

    @pytest.mark.asyncio
    async def test_put_overwrites(self, summary_cache: FileArtifactCache):
        await summary_cache.put("1", "old")
        await summary_cache.put("1", "new")
        assert await summary_cache.get("1") == "new"

    @pytest.mark.asyncio
    async def test_creates_summaries_dir_on_first_write(self, tmp_cache_dir: Path):
        cache = FileArtifactCache(tmp_cache_dir)
        assert not (tmp_cache_dir / SUMMARIES_DIRNAME).exists()
        await cache.put("1", "s")
        assert (tmp_cache_dir / SUMMARIES_DIRNAME / "1").read_text(encoding="utf-8") == "s"

    @pytest.mark.asyncio
    async def test_path_like_id_stays_inside_root(self, summary_cache: FileArtifactCache):
        await summary_cache.put("../../escape", "s")
        files = list(summary_cache.root.iterdir())
        assert len(files) == 1
        assert files[0].name == storage_key("../../escape")
        assert await summary_cache.get("../../escape") == "s"

    @pytest.mark.asyncio
    async def test_list_keys(self, summary_cache: FileArtifactCache):
        assert await summary_cache.list_keys() == []
        await summary_cache.put("b", "s")
        await summary_cache.put("a", "s")
        assert await summary_cache.list_keys() == ["a", "b"]

    @pytest.mark.asyncio
    async def test_list_keys_ignores_leftover_temp_files(self, summary_cache: FileArtifactCache):
        await summary_cache.put("a", "s")
        (summary_cache.root / ".a.123.tmp").write_text("partial", encoding="utf-8")
        assert await summary_cache.list_keys() == ["a"]


class TestFileArtifactCacheIO:
    @pytest.mark.asyncio
    async def test_reads_and_writes_run_in_worker_thread(self, summary_cache: FileArtifactCache):
        real_to_thread = asyncio.to_thread
        calls = []

        async def recording_to_thread(func, *args, **kwargs):
            calls.append(func.__name__)
            return await real_to_thread(func, *args, **kwargs)

        with patch("readnext.cache.file_store.asyncio.to_thread", side_effect=recording_to_thread):
            await summary_cache.put("1", "a summary")
            assert await summary_cache.get("1") == "a summary"
            assert await summary_cache.get("missing") is None

        assert calls == ["_write", "_read", "_read"]

    @pytest.mark.asyncio
    async def test_put_leaves_no_temp_files(self, summary_cache: FileArtifactCache):
        await summary_cache.put("1", "old")
        await summary_cache.put("1", "new")
        assert [p.name for p in summary_cache.root.iterdir()] == ["1"]

    @pytest.mark.asyncio
    async def test_concurrent_puts_of_different_ids(self, summary_cache: FileArtifactCache):
        await asyncio.gather(*(summary_cache.put(str(i), f"summary {i}") for i in range(20)))
        for i in range(20):
            assert await summary_cache.get(str(i)) == f"summary {i}"
