"""
Session and profile management for the signed-in professional.

The session is a bearer token with a locally tracked expiration. A
snapshot of the profile is kept in the key-value store so the app can
show the user while offline.
"""

import json
import time
from collections.abc import Callable, Mapping
from typing import Any

from quotewire.config import get_logger
from quotewire.core.entities.user import LoginResult, UserInfo
from quotewire.core.exceptions import NotAuthenticatedError, RemoteError, ValidationError
from quotewire.core.interfaces.api_client import IApiClient, ITokenManager
from quotewire.core.interfaces.key_value_store import IKeyValueStore
from quotewire.core.services.validation import validate_password

logger = get_logger(__name__)

USER_DATA_KEY = "userData"
_DAY_MS = 24 * 60 * 60 * 1000


def _now_ms() -> int:
    return int(time.time() * 1000)


def _extract_profile(payload: Any) -> dict[str, Any] | None:
    """Find the user object in ``{user: {...}}``, a bare user or any nested object with an id."""
    if not isinstance(payload, Mapping):
        return None
    if isinstance(payload.get("user"), Mapping):
        return dict(payload["user"])
    if payload.get("id"):
        return dict(payload)
    for value in payload.values():
        if isinstance(value, Mapping) and (value.get("id") or value.get("name")):
            return dict(value)
    return None


def _merge_profile(cached: dict[str, Any], fresh: dict[str, Any]) -> dict[str, Any]:
    """Overlay fresh over cached; blank fresh values keep the cached ones."""
    merged = dict(cached)
    for key, value in fresh.items():
        if value is None or value == "":
            continue
        merged[key] = value
    return merged


class AuthService:
    """Login, logout, profile and password reset."""

    def __init__(
        self,
        api: IApiClient,
        tokens: ITokenManager,
        store: IKeyValueStore,
        login_token_days: int = 30,
        clock: Callable[[], int] = _now_ms,
    ):
        self._api = api
        self._tokens = tokens
        self._store = store
        self._login_token_ms = login_token_days * _DAY_MS
        self._clock = clock

    async def _cached_profile(self) -> dict[str, Any] | None:
        raw = await self._store.get_item(USER_DATA_KEY)
        if not raw:
            return None
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("user_snapshot_corrupt")
            return None
        return data if isinstance(data, dict) else None

    async def _save_profile(self, profile: dict[str, Any]) -> None:
        await self._store.set_item(USER_DATA_KEY, json.dumps(profile))

    async def login(self, email: str, password: str) -> LoginResult:
        """Authenticate and start a session."""
        try:
            payload = await self._api.post(
                "/auth/login", {"email": email, "password": password}, auth=False
            )
        except RemoteError as e:
            raise e.with_prefix("Login failed") from e

        result = LoginResult.model_validate(payload)
        await self._tokens.set_token(result.token, self._clock() + self._login_token_ms)
        if result.user is not None:
            await self._save_profile(result.user.to_wire())

        logger.info("user_logged_in", user_id=result.user.id if result.user else None)
        return result

    async def logout(self) -> None:
        await self._tokens.remove_token()
        await self._store.remove_item(USER_DATA_KEY)
        logger.info("user_logged_out")

    async def is_logged_in(self) -> bool:
        return await self._tokens.is_token_valid()

    async def get_user_info(self) -> UserInfo | None:
        """
        Profile of the signed-in user.

        The remote profile is merged over the cached snapshot. When the
        backend is unreachable a complete snapshot is served instead.
        Returns None when nobody is signed in.
        """
        if not await self._tokens.get_token():
            return None

        cached = await self._cached_profile()
        try:
            fresh = _extract_profile(await self._api.get("/auth/profile"))
        except RemoteError as e:
            if cached and cached.get("id"):
                logger.warning("user_profile_from_snapshot", error=e.message)
                return UserInfo.model_validate(cached)
            raise e.with_prefix("Failed to load user profile") from e

        if fresh is None:
            raise RemoteError("Failed to load user profile: no user in response")

        profile = _merge_profile(cached or {}, fresh)
        await self._save_profile(profile)
        return UserInfo.model_validate(profile)

    async def refresh_user_data(self) -> UserInfo:
        user = await self.get_user_info()
        if user is None:
            raise NotAuthenticatedError()
        return user

    async def update_profile(self, changes: Mapping[str, Any]) -> UserInfo:
        """Send profile changes; the snapshot keeps the submitted values."""
        if not await self._tokens.get_token():
            raise NotAuthenticatedError()

        cached = await self._cached_profile() or {}
        try:
            payload = await self._api.put("/auth/profile", dict(changes))
        except RemoteError as e:
            raise e.with_prefix("Failed to update profile") from e

        profile = {**cached, **(_extract_profile(payload) or {}), **changes}
        await self._save_profile(profile)
        logger.info("user_profile_updated", fields=sorted(changes))
        return UserInfo.model_validate(profile)

    # ------------------------------------------------------------------
    # Password reset
    # ------------------------------------------------------------------

    async def check_email(self, email: str) -> None:
        try:
            await self._api.post("/auth/check-email", {"email": email}, auth=False)
        except RemoteError as e:
            raise e.with_prefix("Email not found") from e

    async def send_reset_code(self, email: str) -> None:
        try:
            await self._api.post("/auth/forgot-password", {"email": email}, auth=False)
        except RemoteError as e:
            raise e.with_prefix("Failed to send reset code") from e

    async def check_reset_code(self, email: str, code: str) -> None:
        try:
            await self._api.post(
                "/auth/check-reset-code", {"email": email, "code": code}, auth=False
            )
        except RemoteError as e:
            raise e.with_prefix("Invalid code") from e

    async def reset_password(
        self, email: str, code: str, new_password: str, confirm_password: str
    ) -> None:
        result = validate_password(new_password, confirm_password)
        if not result.is_valid:
            raise ValidationError(result.errors, entity="password")

        try:
            await self._api.post(
                "/auth/reset-password",
                {"email": email, "code": code, "newPassword": new_password},
                auth=False,
            )
        except RemoteError as e:
            raise e.with_prefix("Failed to reset password") from e
        logger.info("password_reset")
