"""Pytest configuration and fixtures."""

from unittest.mock import AsyncMock

import pytest

from quotewire.core.interfaces import IApiClient
from quotewire.core.services.local_cache import LocalCache
from quotewire.infrastructure.storage import InMemoryKeyValueStore

START_MS = 1_760_000_000_000


class FakeClock:
    """Manually advanced epoch-millisecond clock."""

    def __init__(self, now_ms: int = START_MS):
        self.now_ms = now_ms

    def __call__(self) -> int:
        return self.now_ms

    def advance(self, seconds: float) -> None:
        self.now_ms += int(seconds * 1000)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def cache(store: InMemoryKeyValueStore, clock: FakeClock) -> LocalCache:
    """Three-minute cache on the in-memory store."""
    return LocalCache(store, ttl_seconds=180, clock=clock)


@pytest.fixture
def api() -> AsyncMock:
    """Mock backend client; tests set return values per call."""
    return AsyncMock(spec=IApiClient)


@pytest.fixture
def budget_row() -> dict:
    """Budget payload as the backend returns it."""
    return {
        "id": "b1",
        "name": "Kitchen rewiring",
        "clientId": "c1",
        "status": "PENDING",
        "items": [],
        "totalValue": 0,
    }
