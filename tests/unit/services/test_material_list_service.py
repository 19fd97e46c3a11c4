"""Unit tests for MaterialListService."""

import pytest

from quotewire.core.entities import MaterialList, MaterialListFilters, MaterialListItem, QuoteStatus
from quotewire.core.exceptions import RemoteError, ValidationError
from quotewire.core.services.material_list_service import MaterialListService


@pytest.fixture
def service(api, cache) -> MaterialListService:
    return MaterialListService(api, cache)


@pytest.fixture
def list_row() -> dict:
    return {
        "id": "ml1",
        "name": "Parts for kitchen",
        "clientId": "c1",
        "budgetId": "b1",
        "status": "PENDING",
        "items": [],
    }


def _material_row(item_id: str, name: str, quantity: float = 2, price: float = 4) -> dict:
    return {
        "id": item_id,
        "materialId": f"m-{item_id}",
        "name": name,
        "quantity": quantity,
        "unitPrice": price,
        "totalPrice": quantity * price,
    }


class TestCrud:
    async def test_create_requires_client(self, service, api):
        with pytest.raises(ValidationError) as exc:
            await service.create(MaterialList(name="Parts", client_id=""))

        assert exc.value.errors == ["Client is required"]
        api.post.assert_not_awaited()

    async def test_create_posts_to_material_budget_resource(self, service, api, cache, list_row):
        await cache.set("materialLists_{}", [])
        await cache.set("budgets_{}", [])
        api.post.return_value = list_row

        created = await service.create(MaterialList(name="Parts for kitchen", client_id="c1", budget_id="b1"))

        assert created.id == "ml1"
        assert api.post.await_args.args[0] == "/materialBudget"
        assert await cache.get("materialLists_{}") is None
        assert await cache.get("budgets_{}") is not None

    async def test_get_by_budget(self, service, api, list_row):
        api.get.return_value = [list_row]

        lists = await service.get_by_budget("b1")

        assert [m.id for m in lists] == ["ml1"]
        api.get.assert_awaited_once_with("/materialBudget", params={"budgetId": "b1"})

    async def test_list_key_includes_filters(self, service, api, cache, list_row):
        api.get.return_value = [list_row]

        await service.list_all(MaterialListFilters(status=QuoteStatus.PENDING))

        assert await cache.get('materialLists_{"status":"PENDING"}') is not None

    async def test_item_edit_on_approved_list_reopens(self, service, api, list_row):
        api.get.return_value = {**list_row, "status": "APPROVED"}
        api.post.return_value = _material_row("i1", "Cable")

        await service.add_item(
            "ml1", MaterialListItem(name="Cable", material_id="m1", quantity=2, unit_price=4)
        )

        api.patch.assert_awaited_once_with("/materialBudget/ml1/status", {"status": "PENDING"})


class TestDuplicate:
    async def test_copies_items_under_new_name(self, service, api, list_row):
        source = {**list_row, "status": "REJECTED", "items": [_material_row("i1", "Cable"), _material_row("i2", "Conduit")]}
        api.get.side_effect = [source, {**list_row, "id": "ml2", "name": "Copy"}]
        api.post.side_effect = [
            {**list_row, "id": "ml2", "name": "Copy"},
            _material_row("n1", "Cable"),
            _material_row("n2", "Conduit"),
        ]

        result = await service.duplicate("ml1", "Copy")

        assert not result.is_partial
        create_body = api.post.await_args_list[0].args[1]
        assert create_body["status"] == "PENDING"
        assert create_body["budgetId"] == "b1"
        assert [i.name for i in result.copied_items] == ["Cable", "Conduit"]


class TestCreateFromBudget:
    async def test_copies_only_material_items(self, service, api, list_row):
        budget = {
            "id": "b1",
            "name": "Kitchen rewiring",
            "clientId": "c1",
            "items": [
                {"id": "i1", "serviceId": "s1", "name": "Labour", "quantity": 1, "unitPrice": 200},
                {"id": "i2", "materialId": "m1", "name": "Cable", "quantity": 10, "unitPrice": 3},
                {
                    "id": "i3",
                    "materialId": "m2",
                    "quantity": 4,
                    "unitPrice": 12,
                    "material": {"id": "m2", "name": "Breaker 20A"},
                },
            ],
        }
        api.get.side_effect = [budget, {**list_row, "items": [_material_row("n1", "Cable")]}]
        api.post.side_effect = [list_row, _material_row("n1", "Cable"), _material_row("n2", "Breaker 20A")]

        result = await service.create_from_budget("b1")

        create_body = api.post.await_args_list[0].args[1]
        assert create_body["name"] == "Material list - Kitchen rewiring"
        assert create_body["budgetId"] == "b1"
        assert create_body["clientId"] == "c1"

        item_bodies = [c.args[1] for c in api.post.await_args_list[1:]]
        assert [b["materialId"] for b in item_bodies] == ["m1", "m2"]
        assert item_bodies[1]["name"] == "Breaker 20A"
        assert api.get.await_args_list[0].args == ("/budgets/b1",)
        assert len(result.copied_items) == 2

    async def test_budget_fetch_failure(self, service, api):
        api.get.side_effect = RemoteError("Budget not found", status_code=404)

        with pytest.raises(RemoteError, match="^Failed to create material list: Budget not found"):
            await service.create_from_budget("missing", "Parts")


class TestPublicLink:
    async def test_status_by_public_link(self, service, api, list_row):
        api.get.return_value = {**list_row, "status": "APPROVED", "totalValue": 120}

        status = await service.get_status_by_public_link("link-9", "ml1")

        assert status.material_list_id == "ml1"
        assert status.status is QuoteStatus.APPROVED
        api.get.assert_awaited_once_with("/public/link-9/material-lists/ml1", auth=False)

    async def test_client_rejection(self, service, api):
        api.post.return_value = None

        await service.update_status_by_public_link("link-9", "ml1", QuoteStatus.REJECTED, "Too pricey")

        api.post.assert_awaited_once_with(
            "/public/link-9/material-lists/ml1/reject", {"clientNotes": "Too pricey"}, auth=False
        )


class TestSummary:
    def test_totals_and_quantity(self, service):
        material_list = MaterialList(
            name="x",
            client_id="c1",
            items=[
                MaterialListItem(name="a", material_id="m1", quantity=10, unit_price=3),
                MaterialListItem(name="b", material_id="m2", quantity=4, unit_price=12),
            ],
        )

        summary = service.summary(material_list)

        assert summary.total_items == 2
        assert summary.total_value == 78.0
        assert summary.total_quantity == 14
        assert summary.items_by_type.materials == 2
        assert summary.items_by_type.services == 0
        assert summary.average_item_value == 39.0
