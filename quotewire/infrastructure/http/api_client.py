"""
httpx implementation of the backend REST client.

Attaches the stored bearer token, decodes JSON bodies and maps failures
onto the domain exception hierarchy.
"""

import time
from typing import Any

import httpx

from quotewire.config import get_logger
from quotewire.core.exceptions import (
    NetworkError,
    NotAuthenticatedError,
    RemoteError,
    SessionExpiredError,
)
from quotewire.core.interfaces.api_client import IApiClient, ITokenManager

logger = get_logger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Backend error text from ``{message}`` or ``{error}``, else the status line."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict):
        for key in ("message", "error"):
            if isinstance(body.get(key), str) and body[key]:
                return body[key]
    return f"HTTP {response.status_code} {response.reason_phrase}".strip()


class HttpApiClient(IApiClient):
    """
    Async JSON client for the backend.

    One ``httpx.AsyncClient`` is reused for every call; pass
    ``transport`` to route requests elsewhere (tests use
    ``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        tokens: ITokenManager,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._tokens = tokens
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        auth: bool = True,
    ) -> Any:
        headers: dict[str, str] = {}
        token = await self._tokens.get_token()
        if token:
            headers["Authorization"] = f"Bearer {token}"
        elif auth:
            raise NotAuthenticatedError()

        start_time = time.time()
        try:
            response = await self._client.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.HTTPError as e:
            logger.warning("api_request_failed", method=method, path=path, error=str(e))
            raise NetworkError(method, path, str(e) or type(e).__name__) from e

        elapsed_ms = int((time.time() - start_time) * 1000)
        logger.debug(
            "api_request",
            method=method,
            path=path,
            status=response.status_code,
            elapsed_ms=elapsed_ms,
        )

        if response.status_code == 401 and auth:
            await self._tokens.remove_token()
            logger.info("session_expired", path=path)
            raise SessionExpiredError()

        if response.is_error:
            raise RemoteError(_error_message(response), status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RemoteError(
                f"Invalid JSON from {method} {path}", status_code=response.status_code
            ) from e

    async def get(
        self,
        path: str,
        *,
        params: dict[str, str] | None = None,
        auth: bool = True,
    ) -> Any:
        return await self._request("GET", path, params=params, auth=auth)

    async def post(self, path: str, json: Any = None, *, auth: bool = True) -> Any:
        return await self._request("POST", path, json=json, auth=auth)

    async def put(self, path: str, json: Any = None, *, auth: bool = True) -> Any:
        return await self._request("PUT", path, json=json, auth=auth)

    async def patch(self, path: str, json: Any = None, *, auth: bool = True) -> Any:
        return await self._request("PATCH", path, json=json, auth=auth)

    async def delete(self, path: str, *, auth: bool = True) -> Any:
        return await self._request("DELETE", path, auth=auth)
