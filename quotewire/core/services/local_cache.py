"""
Local TTL cache over a persistent key-value store.

Entries are ``{data, timestamp}`` JSON blobs stored under a namespaced
key. The cache serves reads within the validity window, keeps stale
data as a fallback for when the backend is unreachable, and is
invalidated explicitly on every write.
"""

import time
from collections.abc import Awaitable, Callable
from typing import Any

import pydantic

from quotewire.config import get_logger
from quotewire.core.entities.cache import CacheEntry
from quotewire.core.exceptions import RemoteError, StorageError
from quotewire.core.interfaces.key_value_store import IKeyValueStore

logger = get_logger(__name__)

KeyPredicate = Callable[[str], bool]

DEFAULT_TTL_SECONDS = 3 * 60


def _now_ms() -> int:
    return int(time.time() * 1000)


def starts_with(prefix: str) -> KeyPredicate:
    """Match cache keys beginning with prefix."""
    return lambda key: key.startswith(prefix)


def mentions(fragment: str) -> KeyPredicate:
    """Match cache keys containing fragment anywhere."""
    return lambda key: fragment in key


def any_of(*predicates: KeyPredicate) -> KeyPredicate:
    """Match keys accepted by at least one predicate."""
    return lambda key: any(p(key) for p in predicates)


class LocalCache:
    """
    Per-key TTL cache.

    Keys passed to this class are logical names such as ``budget_42``;
    the namespace prefix is added before touching the store, and
    predicates given to ``invalidate`` see the logical name.
    """

    def __init__(
        self,
        store: IKeyValueStore,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        key_prefix: str = "cache_",
        clock: Callable[[], int] = _now_ms,
    ):
        self._store = store
        self._ttl_ms = ttl_seconds * 1000
        self._prefix = key_prefix
        self._clock = clock

    def _storage_key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> CacheEntry | None:
        """Return the entry under key, or None when missing or unreadable."""
        try:
            raw = await self._store.get_item(self._storage_key(key))
        except StorageError as e:
            logger.warning("cache_read_failed", key=key, error=str(e))
            return None

        if raw is None:
            return None

        try:
            return CacheEntry.model_validate_json(raw)
        except pydantic.ValidationError:
            logger.warning("cache_entry_corrupt", key=key)
            try:
                await self.remove(key)
            except StorageError as e:
                logger.warning("cache_purge_failed", key=key, error=str(e))
            return None

    async def set(self, key: str, data: Any) -> None:
        """Store data under key stamped with the current time."""
        entry = CacheEntry(data=data, timestamp=self._clock())
        try:
            await self._store.set_item(self._storage_key(key), entry.model_dump_json())
        except StorageError as e:
            # A failed write only costs a future cache miss
            logger.warning("cache_write_failed", key=key, error=str(e))

    async def remove(self, key: str) -> None:
        """Delete a single entry."""
        await self._store.remove_item(self._storage_key(key))

    def is_valid(self, timestamp: int) -> bool:
        """True while timestamp is inside the validity window."""
        return self._clock() - timestamp < self._ttl_ms

    async def invalidate(self, predicate: KeyPredicate) -> int:
        """
        Remove every cache entry whose logical key matches predicate.

        Returns the number of entries removed. Safe to repeat.
        """
        matched = [
            storage_key
            for storage_key in await self._store.keys()
            if storage_key.startswith(self._prefix)
            and predicate(storage_key[len(self._prefix) :])
        ]
        if matched:
            await self._store.multi_remove(matched)
            logger.debug("cache_invalidated", count=len(matched))
        return len(matched)

    async def read_through(
        self,
        key: str,
        fetch: Callable[[], Awaitable[Any]],
        *,
        use_cached: bool = True,
    ) -> Any:
        """
        Serve key from cache or from fetch.

        A valid entry is returned without calling fetch (unless
        use_cached is False). Fresh data refreshes the entry. When fetch
        raises RemoteError, any cached data is returned regardless of
        age; the error propagates only if nothing is cached.
        """
        cached = await self.get(key)
        if use_cached and cached is not None and self.is_valid(cached.timestamp):
            logger.debug("cache_hit", key=key)
            return cached.data

        try:
            data = await fetch()
        except RemoteError as e:
            if cached is not None:
                logger.warning("cache_fallback_used", key=key, error=e.message)
                return cached.data
            raise

        await self.set(key, data)
        return data
