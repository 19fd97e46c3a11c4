"""Client (customer) service."""

from collections.abc import Mapping
from typing import Any

from quotewire.config import get_logger
from quotewire.core.entities.client import Client, ClientStats
from quotewire.core.exceptions import RemoteError, ValidationError
from quotewire.core.interfaces.api_client import IApiClient
from quotewire.core.services.payloads import to_payload, unwrap_list
from quotewire.core.services.validation import validate_client

logger = get_logger(__name__)

_READ_ONLY = {"id", "public_link", "total_value", "client_since", "created_at", "updated_at"}


class ClientService:
    """
    Customers of the signed-in professional.

    Client reads are not cached; budgets and material lists hold their
    own client references.
    """

    def __init__(self, api: IApiClient):
        self._api = api

    async def create(self, data: Client | Mapping[str, Any]) -> Client:
        result = validate_client(data)
        if not result.is_valid:
            raise ValidationError(result.errors, entity="client")

        try:
            payload = await self._api.post("/clients", to_payload(data, exclude=_READ_ONLY))
        except RemoteError as e:
            raise e.with_prefix("Failed to create client") from e

        client = Client.model_validate(payload)
        logger.info("client_created", id=client.id)
        return client

    async def list_all(self) -> list[Client]:
        try:
            payload = await self._api.get("/clients")
        except RemoteError as e:
            raise e.with_prefix("Failed to list clients") from e
        return [Client.model_validate(row) for row in unwrap_list(payload, "clients", "data")]

    async def get(self, client_id: str) -> Client:
        try:
            payload = await self._api.get(f"/clients/{client_id}")
        except RemoteError as e:
            raise e.with_prefix("Failed to fetch client") from e
        return Client.model_validate(payload)

    async def update(self, client_id: str, data: Client | Mapping[str, Any]) -> Client:
        try:
            payload = await self._api.put(
                f"/clients/{client_id}", to_payload(data, exclude=_READ_ONLY)
            )
        except RemoteError as e:
            raise e.with_prefix("Failed to update client") from e
        return Client.model_validate(payload)

    async def delete(self, client_id: str) -> None:
        try:
            await self._api.delete(f"/clients/{client_id}")
        except RemoteError as e:
            raise e.with_prefix("Failed to delete client") from e
        logger.info("client_deleted", id=client_id)

    async def stats(self) -> ClientStats:
        try:
            payload = await self._api.get("/clients/stats")
        except RemoteError as e:
            raise e.with_prefix("Failed to load client stats") from e
        return ClientStats.model_validate(payload)
