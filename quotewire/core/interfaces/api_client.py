"""
Abstract interfaces for the remote backend and the session token.

Domain services depend on these ports only; the httpx implementation
lives in the infrastructure layer.
"""

from abc import ABC, abstractmethod
from typing import Any


class IApiClient(ABC):
    """
    JSON REST client for the backend.

    Every method returns the decoded response body (None for empty
    bodies). Authenticated calls raise NotAuthenticatedError when no
    token is stored and SessionExpiredError on HTTP 401; any other
    failure raises RemoteError.
    """

    @abstractmethod
    async def get(
        self,
        path: str,
        *,
        params: dict[str, str] | None = None,
        auth: bool = True,
    ) -> Any:
        """GET path."""

    @abstractmethod
    async def post(self, path: str, json: Any = None, *, auth: bool = True) -> Any:
        """POST json to path."""

    @abstractmethod
    async def put(self, path: str, json: Any = None, *, auth: bool = True) -> Any:
        """PUT json to path."""

    @abstractmethod
    async def patch(self, path: str, json: Any = None, *, auth: bool = True) -> Any:
        """PATCH json to path."""

    @abstractmethod
    async def delete(self, path: str, *, auth: bool = True) -> Any:
        """DELETE path."""


class ITokenManager(ABC):
    """Stores the bearer token and its expiration instant."""

    @abstractmethod
    async def get_token(self) -> str | None:
        """Current token, or None when signed out."""

    @abstractmethod
    async def set_token(self, token: str, expires_at_ms: int) -> None:
        """Persist token with its expiration (epoch ms)."""

    @abstractmethod
    async def remove_token(self) -> None:
        """Forget the token and its expiration."""

    @abstractmethod
    async def is_token_valid(self) -> bool:
        """True when a token is stored and not yet expired."""
