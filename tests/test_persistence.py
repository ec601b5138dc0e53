"""Tests for dashterm.core.persistence."""

import json
from pathlib import Path

import httpx
import pytest

from dashterm.core.persistence import HttpLoader, SnapshotStore

SNAPSHOT = {"layout": {"gridSize": 50, "isCompact": False}, "plugins": []}


class TestSnapshotStore:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert SnapshotStore(tmp_path / "state.json").load() is None

    def test_save_creates_directories(self, tmp_path: Path) -> None:
        store = SnapshotStore(tmp_path / "nested" / "state.json")
        assert store.save(SNAPSHOT)
        assert json.loads(store.path.read_text()) == SNAPSHOT
        assert SnapshotStore(store.path).load() == SNAPSHOT

    def test_corrupt_file(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        path.write_text("{not json")
        assert SnapshotStore(path).load() is None

    def test_save_if_changed(self, tmp_path: Path) -> None:
        store = SnapshotStore(tmp_path / "state.json")
        assert store.save_if_changed(SNAPSHOT)
        assert not store.save_if_changed(dict(SNAPSHOT))
        changed = {**SNAPSHOT, "layout": {"gridSize": 20, "isCompact": False}}
        assert store.save_if_changed(changed)

    def test_loaded_snapshot_counts_as_saved(self, tmp_path: Path) -> None:
        path = tmp_path / "state.json"
        SnapshotStore(path).save(SNAPSHOT)
        store = SnapshotStore(path)
        store.load()
        assert not store.save_if_changed(SNAPSHOT)


class TestHttpLoader:
    @pytest.mark.asyncio
    async def test_fetch_json(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path == "/dash.json"
            return httpx.Response(200, json=SNAPSHOT)

        loader = HttpLoader(transport=httpx.MockTransport(handler))
        assert await loader.fetch_json("https://example.test/dash.json") == SNAPSHOT

    @pytest.mark.asyncio
    async def test_http_error_raises(self) -> None:
        loader = HttpLoader(transport=httpx.MockTransport(lambda request: httpx.Response(404)))
        with pytest.raises(httpx.HTTPStatusError):
            await loader.fetch_json("https://example.test/missing.json")

    @pytest.mark.asyncio
    async def test_invalid_body_raises(self) -> None:
        loader = HttpLoader(transport=httpx.MockTransport(lambda request: httpx.Response(200, text="<html>")))
        with pytest.raises(ValueError):
            await loader.fetch_json("https://example.test/page")
