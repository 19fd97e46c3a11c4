"""
Abstract interface for the persistent local key-value store.

Mirrors the narrow surface of a device key-value store so the
cache and session code can run against any backend.
"""

from abc import ABC, abstractmethod


class IKeyValueStore(ABC):
    """
    Abstract string key-value store.

    Values are opaque strings; callers own serialization.
    """

    @abstractmethod
    async def get_item(self, key: str) -> str | None:
        """Get the value stored under key, or None."""

    @abstractmethod
    async def set_item(self, key: str, value: str) -> None:
        """Store value under key, overwriting any previous value."""

    @abstractmethod
    async def remove_item(self, key: str) -> None:
        """Remove key. Removing a missing key is a no-op."""

    @abstractmethod
    async def multi_remove(self, keys: list[str]) -> None:
        """Remove every key in keys. Missing keys are ignored."""

    @abstractmethod
    async def keys(self) -> list[str]:
        """List all stored keys."""
