"""Core interfaces (ports) for dependency injection."""

from quotewire.core.interfaces.api_client import IApiClient, ITokenManager
from quotewire.core.interfaces.key_value_store import IKeyValueStore

__all__ = [
    # Remote interfaces
    "IApiClient",
    "ITokenManager",
    # Storage interfaces
    "IKeyValueStore",
]
