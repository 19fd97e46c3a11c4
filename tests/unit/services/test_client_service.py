"""Unit tests for ClientService."""

import pytest

from quotewire.core.entities import Client
from quotewire.core.exceptions import RemoteError, ValidationError
from quotewire.core.services.client_service import ClientService


@pytest.fixture
def service(api) -> ClientService:
    return ClientService(api)


@pytest.fixture
def client_row() -> dict:
    return {
        "id": "c1",
        "fullName": "Maria Souza",
        "phone": "11987654321",
        "cep": "01310100",
        "street": "Av. Paulista",
        "number": "1000",
        "neighborhood": "Bela Vista",
        "city": "Sao Paulo",
        "state": "SP",
        "publicLink": "link-123",
        "totalValue": 1500,
    }


class TestClientService:
    async def test_create_rejects_invalid_client(self, service, api):
        with pytest.raises(ValidationError) as exc:
            await service.create({"fullName": "M", "phone": "123"})

        assert "Full name must have at least 2 characters" in exc.value.errors
        assert "Phone must have at least 10 digits" in exc.value.errors
        api.post.assert_not_awaited()

    async def test_create_drops_server_fields(self, service, api, client_row):
        api.post.return_value = client_row

        client = await service.create(Client.model_validate(client_row))

        body = api.post.await_args.args[1]
        assert client.public_link == "link-123"
        assert "id" not in body
        assert "publicLink" not in body
        assert "totalValue" not in body
        assert body["fullName"] == "Maria Souza"

    async def test_list_and_get(self, service, api, client_row):
        api.get.side_effect = [[client_row], client_row]

        clients = await service.list_all()
        client = await service.get("c1")

        assert [c.id for c in clients] == ["c1"]
        assert client.full_name == "Maria Souza"

    async def test_update(self, service, api, client_row):
        api.put.return_value = {**client_row, "city": "Campinas"}

        client = await service.update("c1", {"city": "Campinas"})

        assert client.city == "Campinas"
        api.put.assert_awaited_once_with("/clients/c1", {"city": "Campinas"})

    async def test_delete_failure_is_prefixed(self, service, api):
        api.delete.side_effect = RemoteError("Client has budgets", status_code=409)

        with pytest.raises(RemoteError, match="^Failed to delete client: Client has budgets$"):
            await service.delete("c1")

    async def test_stats(self, service, api):
        api.get.return_value = {"totalClients": 12, "totalValue": 9800.5, "recentClients": 3, "activeProjects": 4}

        stats = await service.stats()

        assert stats.total_clients == 12
        api.get.assert_awaited_once_with("/clients/stats")
