"""Tests for masthead.store: MemoryStore scans, lookups, and JSON seeding."""

import json
from pathlib import Path

import pytest

from masthead.errors import StoreError
from masthead.store import MemoryStore


class TestScan:
    async def test_scan_returns_records_in_order(self) -> None:
        store = MemoryStore({"posts": [{"postId": "a"}, {"postId": "b"}]})
        result = await store.scan("posts")
        assert [r["postId"] for r in result.items] == ["a", "b"]
        assert result.count == 2

    async def test_unknown_collection_raises(self) -> None:
        store = MemoryStore()
        with pytest.raises(StoreError) as exc_info:
            await store.scan("posts")
        assert exc_info.value.collection == "posts"

    async def test_scan_returns_copies(self) -> None:
        store = MemoryStore({"posts": [{"postId": "a"}]})
        result = await store.scan("posts")
        result.items[0]["postId"] = "mutated"  # type: ignore[index]
        again = await store.scan("posts")
        assert again.items[0]["postId"] == "a"

    async def test_create_collection(self) -> None:
        store = MemoryStore()
        store.create_collection("quizzes")
        result = await store.scan("quizzes")
        assert result.count == 0


class TestGetAndPut:
    async def test_get_first_match(self) -> None:
        store = MemoryStore({"quizzes": [{"quizId": "q1"}, {"quizId": "q2"}]})
        record = await store.get("quizzes", "quizId", "q2")
        assert record == {"quizId": "q2"}

    async def test_get_missing(self) -> None:
        store = MemoryStore({"quizzes": []})
        assert await store.get("quizzes", "quizId", "nope") is None
        assert await store.get("unknown", "quizId", "nope") is None

    async def test_put_creates_collection(self) -> None:
        store = MemoryStore()
        await store.put("posts", {"postId": "p1"})
        result = await store.scan("posts")
        assert result.items == ({"postId": "p1"},)


class TestFromJson:
    async def test_loads_every_collection(self, tmp_path: Path) -> None:
        path = tmp_path / "site.json"
        path.write_text(json.dumps({"posts": [{"postId": "p1"}], "quizzes": []}))
        store = MemoryStore.from_json(path)
        assert (await store.scan("posts")).count == 1
        assert (await store.scan("quizzes")).count == 0

    async def test_loaded_records_are_scannable(self, tmp_path: Path) -> None:
        path = tmp_path / "site.json"
        path.write_text(json.dumps({"posts": [{"postId": "p1"}]}))
        store = MemoryStore.from_json(str(path))
        result = await store.scan("posts")
        assert result.items[0]["postId"] == "p1"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(StoreError, match="cannot load seed data"):
            MemoryStore.from_json(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json")
        with pytest.raises(StoreError):
            MemoryStore.from_json(path)

    def test_top_level_must_be_object(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(StoreError, match="JSON object"):
            MemoryStore.from_json(path)
