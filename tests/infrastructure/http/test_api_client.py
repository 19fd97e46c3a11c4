"""Tests for the httpx backend client."""

import json

import httpx
import pytest

from quotewire.core.exceptions import (
    NetworkError,
    NotAuthenticatedError,
    RemoteError,
    SessionExpiredError,
)
from quotewire.infrastructure.http import HttpApiClient, TokenManager

BASE_URL = "http://backend.test/api"


class Recorder:
    """MockTransport handler returning one canned response and keeping requests."""

    def __init__(self, status_code: int = 200, body=None, content: bytes | None = None):
        self.status_code = status_code
        self.body = body
        self.content = content
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.body)


@pytest.fixture
def tokens(store, clock) -> TokenManager:
    return TokenManager(store, clock=clock)


@pytest.fixture
async def signed_in(tokens, clock) -> TokenManager:
    await tokens.set_token("tok-1", clock() + 60_000)
    return tokens


def _client(tokens: TokenManager, handler) -> HttpApiClient:
    return HttpApiClient(BASE_URL, tokens, transport=httpx.MockTransport(handler))


class TestRequests:
    async def test_bearer_token_and_base_path(self, signed_in):
        recorder = Recorder(body=[{"id": "b1"}])
        client = _client(signed_in, recorder)

        result = await client.get("/budgets", params={"status": "PENDING"})

        assert result == [{"id": "b1"}]
        request = recorder.requests[0]
        assert request.url.path == "/api/budgets"
        assert request.url.params["status"] == "PENDING"
        assert request.headers["Authorization"] == "Bearer tok-1"
        await client.close()

    async def test_json_body(self, signed_in):
        recorder = Recorder(status_code=201, body={"id": "b1"})
        client = _client(signed_in, recorder)

        await client.post("/budgets", {"name": "Kitchen", "clientId": "c1"})

        request = recorder.requests[0]
        assert request.method == "POST"
        assert json.loads(request.content) == {"name": "Kitchen", "clientId": "c1"}
        await client.close()

    async def test_empty_body_returns_none(self, signed_in):
        client = _client(signed_in, Recorder(status_code=204, content=b""))

        assert await client.delete("/budgets/b1") is None
        await client.close()

    async def test_missing_token_fails_before_request(self, tokens):
        recorder = Recorder(body={})
        client = _client(tokens, recorder)

        with pytest.raises(NotAuthenticatedError):
            await client.get("/budgets")

        assert recorder.requests == []
        await client.close()

    async def test_public_call_without_token(self, tokens):
        recorder = Recorder(body={"id": "c1", "budgets": []})
        client = _client(tokens, recorder)

        await client.get("/public/link-1", auth=False)

        assert "Authorization" not in recorder.requests[0].headers
        await client.close()


class TestErrors:
    async def test_401_purges_token(self, signed_in, store):
        client = _client(signed_in, Recorder(status_code=401, body={"message": "jwt expired"}))

        with pytest.raises(SessionExpiredError):
            await client.get("/budgets")

        assert await store.get_item("userToken") is None
        assert await store.get_item("tokenExpiration") is None
        await client.close()

    async def test_401_on_public_call_is_remote_error(self, tokens):
        client = _client(tokens, Recorder(status_code=401, body={"message": "Invalid credentials"}))

        with pytest.raises(RemoteError, match="Invalid credentials"):
            await client.post("/auth/login", {"email": "a", "password": "b"}, auth=False)
        await client.close()

    async def test_backend_message_used(self, signed_in):
        client = _client(signed_in, Recorder(status_code=404, body={"message": "Budget not found"}))

        with pytest.raises(RemoteError) as exc:
            await client.get("/budgets/nope")

        assert exc.value.message == "Budget not found"
        assert exc.value.status_code == 404
        await client.close()

    async def test_error_key_used(self, signed_in):
        client = _client(signed_in, Recorder(status_code=400, body={"error": "Bad discount"}))

        with pytest.raises(RemoteError, match="^Bad discount$"):
            await client.patch("/budgets/b1/discount", {"discount": -1})
        await client.close()

    async def test_status_line_when_body_is_not_json(self, signed_in):
        client = _client(signed_in, Recorder(status_code=502, content=b"<html>Bad gateway</html>"))

        with pytest.raises(RemoteError) as exc:
            await client.get("/budgets")

        assert exc.value.message.startswith("HTTP 502")
        await client.close()

    async def test_transport_failure_is_network_error(self, signed_in):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(signed_in, handler)

        with pytest.raises(NetworkError) as exc:
            await client.put("/budgets/b1", {"name": "x"})

        assert isinstance(exc.value, RemoteError)
        assert "connection refused" in exc.value.message
        await client.close()
