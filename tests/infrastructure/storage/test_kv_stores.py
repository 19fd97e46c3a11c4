"""Tests for the key-value store implementations."""

from collections.abc import AsyncGenerator
from pathlib import Path

import pytest

from quotewire.core.services.local_cache import LocalCache, starts_with
from quotewire.infrastructure.storage import InMemoryKeyValueStore, SQLiteKeyValueStore


@pytest.fixture
def temp_db_path(tmp_path: Path) -> Path:
    """Create a temporary database path."""
    return tmp_path / "nested" / "test.db"


@pytest.fixture
async def sqlite_store(temp_db_path: Path) -> AsyncGenerator[SQLiteKeyValueStore, None]:
    store = SQLiteKeyValueStore(temp_db_path)
    await store.initialize()
    yield store
    await store.close()


@pytest.fixture(params=["memory", "sqlite"])
async def kv_store(request, temp_db_path: Path):
    if request.param == "memory":
        yield InMemoryKeyValueStore()
        return
    store = SQLiteKeyValueStore(temp_db_path)
    yield store
    await store.close()


class TestKeyValueContract:
    async def test_set_get(self, kv_store):
        await kv_store.set_item("a", "1")
        assert await kv_store.get_item("a") == "1"

    async def test_missing(self, kv_store):
        assert await kv_store.get_item("nope") is None

    async def test_overwrite(self, kv_store):
        await kv_store.set_item("a", "1")
        await kv_store.set_item("a", "2")
        assert await kv_store.get_item("a") == "2"
        assert await kv_store.keys() == ["a"]

    async def test_remove_is_idempotent(self, kv_store):
        await kv_store.set_item("a", "1")
        await kv_store.remove_item("a")
        await kv_store.remove_item("a")
        assert await kv_store.get_item("a") is None

    async def test_multi_remove(self, kv_store):
        for key in ("a", "b", "c"):
            await kv_store.set_item(key, key)

        await kv_store.multi_remove(["a", "c", "missing"])

        assert await kv_store.keys() == ["b"]

    async def test_multi_remove_empty(self, kv_store):
        await kv_store.set_item("a", "1")
        await kv_store.multi_remove([])
        assert await kv_store.keys() == ["a"]


class TestSQLiteKeyValueStore:
    async def test_creates_parent_directory(self, sqlite_store, temp_db_path):
        assert temp_db_path.exists()

    async def test_persists_across_connections(self, temp_db_path):
        first = SQLiteKeyValueStore(temp_db_path)
        await first.set_item("cache_budget_b1", '{"data": {}, "timestamp": 1}')
        await first.close()

        second = SQLiteKeyValueStore(temp_db_path)
        try:
            assert await second.get_item("cache_budget_b1") == '{"data": {}, "timestamp": 1}'
        finally:
            await second.close()

    async def test_backs_local_cache(self, sqlite_store, clock):
        cache = LocalCache(sqlite_store, clock=clock)
        await cache.set("budgets_{}", [{"id": "b1"}])
        await cache.set("budget_b1", {"id": "b1"})

        assert (await cache.get("budgets_{}")).data == [{"id": "b1"}]
        assert await cache.invalidate(starts_with("budget")) == 2
        assert await sqlite_store.keys() == []
