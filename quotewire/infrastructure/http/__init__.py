"""HTTP access to the backend."""

from quotewire.infrastructure.http.api_client import HttpApiClient
from quotewire.infrastructure.http.token_manager import TokenManager

__all__ = ["HttpApiClient", "TokenManager"]
