"""Key-value store implementations."""

from quotewire.infrastructure.storage.memory_store import InMemoryKeyValueStore
from quotewire.infrastructure.storage.sqlite_store import SQLiteKeyValueStore

__all__ = ["InMemoryKeyValueStore", "SQLiteKeyValueStore"]
