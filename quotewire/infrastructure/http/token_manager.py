"""
Bearer token persistence.

The token and its expiration (epoch milliseconds, as a decimal string)
live under fixed keys in the local key-value store.
"""

import time
from collections.abc import Callable

from quotewire.config import get_logger
from quotewire.core.exceptions import AuthError, RemoteError
from quotewire.core.interfaces.api_client import IApiClient, ITokenManager
from quotewire.core.interfaces.key_value_store import IKeyValueStore

logger = get_logger(__name__)

TOKEN_KEY = "userToken"
EXPIRATION_KEY = "tokenExpiration"


def _now_ms() -> int:
    return int(time.time() * 1000)


class TokenManager(ITokenManager):
    """Token storage with near-expiry refresh."""

    def __init__(
        self,
        store: IKeyValueStore,
        refresh_threshold_seconds: int = 60 * 60,
        refreshed_token_hours: int = 24,
        clock: Callable[[], int] = _now_ms,
    ):
        self._store = store
        self._threshold_ms = refresh_threshold_seconds * 1000
        self._refreshed_ms = refreshed_token_hours * 60 * 60 * 1000
        self._clock = clock

    async def get_token(self) -> str | None:
        return await self._store.get_item(TOKEN_KEY)

    async def set_token(self, token: str, expires_at_ms: int) -> None:
        await self._store.set_item(TOKEN_KEY, token)
        await self._store.set_item(EXPIRATION_KEY, str(int(expires_at_ms)))

    async def remove_token(self) -> None:
        await self._store.multi_remove([TOKEN_KEY, EXPIRATION_KEY])

    async def get_expiration(self) -> int | None:
        raw = await self._store.get_item(EXPIRATION_KEY)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            logger.warning("token_expiration_unreadable", value=raw)
            return None

    async def is_token_valid(self) -> bool:
        token = await self.get_token()
        expiration = await self.get_expiration()
        if not token or expiration is None:
            return False
        return self._clock() < expiration

    async def ensure_valid_token(self, api: IApiClient) -> bool:
        """
        Refresh the token when it is within the threshold of expiring.

        Returns False, with the session cleared, when no session exists
        or the refresh is refused.
        """
        token = await self.get_token()
        expiration = await self.get_expiration()
        if not token or expiration is None:
            return False

        if self._clock() <= expiration - self._threshold_ms:
            return True

        try:
            payload = await api.post("/auth/refresh-token", {"token": token})
        except (RemoteError, AuthError) as e:
            logger.warning("token_refresh_failed", error=e.message)
            await self.remove_token()
            return False

        new_token = payload.get("token") if isinstance(payload, dict) else None
        if not new_token:
            logger.warning("token_refresh_failed", error="no token in response")
            await self.remove_token()
            return False

        await self.set_token(new_token, self._clock() + self._refreshed_ms)
        logger.info("token_refreshed")
        return True
