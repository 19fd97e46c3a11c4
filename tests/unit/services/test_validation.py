"""Unit tests for validation rules."""

import math
from datetime import UTC, datetime

import pytest

from quotewire.core.entities import Budget, BudgetItem, MaterialListItem, QuoteStatus
from quotewire.core.services.validation import (
    parse_date,
    validate_budget,
    validate_budget_item,
    validate_client,
    validate_material,
    validate_material_list,
    validate_material_list_item,
    validate_password,
    validate_service,
)

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


class TestBudgetRules:
    def test_valid_model(self):
        budget = Budget(name="Panel", client_id="c1", status=QuoteStatus.PENDING)
        assert validate_budget(budget, now=NOW).is_valid

    def test_collects_every_violation(self):
        result = validate_budget({"name": "  ", "clientId": "", "status": "DRAFT"}, now=NOW)
        assert result.errors == [
            "Budget name is required",
            "Client is required",
            "Invalid status. Use: PENDING, APPROVED, REJECTED, EXPIRED",
        ]

    def test_past_valid_until(self):
        result = validate_budget(
            {"name": "x", "clientId": "c1", "validUntil": "2025-05-31"}, now=NOW
        )
        assert result.errors == ["Valid-until date must be in the future"]

    def test_future_valid_until(self):
        result = validate_budget(
            {"name": "x", "clientId": "c1", "validUntil": "2025-07-01T00:00:00Z"}, now=NOW
        )
        assert result.is_valid

    def test_unparseable_valid_until(self):
        result = validate_budget({"name": "x", "clientId": "c1", "validUntil": "soon"}, now=NOW)
        assert result.errors == ["Invalid valid-until date"]

    def test_snake_case_keys_accepted(self):
        assert validate_budget({"name": "x", "client_id": "c1"}, now=NOW).is_valid


class TestBudgetItemRules:
    def test_name_and_quantity_reported_together(self):
        result = validate_budget_item(
            {"name": "", "quantity": 0, "unitPrice": 10, "serviceId": "s1"}
        )
        assert not result.is_valid
        assert result.errors == [
            "Item name is required",
            "Quantity must be greater than zero",
        ]

    def test_must_link_catalog_record(self):
        result = validate_budget_item(BudgetItem(name="Socket", quantity=1, unit_price=5))
        assert result.errors == ["Item must be linked to a service or material"]

    def test_negative_price(self):
        result = validate_budget_item(
            BudgetItem(name="Socket", quantity=1, unit_price=-1, material_id="m1")
        )
        assert result.errors == ["Unit price must be greater than zero"]

    def test_non_finite_quantity(self):
        result = validate_budget_item(
            {"name": "Socket", "quantity": math.inf, "unitPrice": 1, "materialId": "m1"}
        )
        assert result.errors == ["Quantity must be a finite number"]

    def test_non_numeric_quantity(self):
        result = validate_budget_item(
            {"name": "Socket", "quantity": "2", "unitPrice": 1, "materialId": "m1"}
        )
        assert result.errors == ["Quantity must be greater than zero"]


class TestMaterialListRules:
    def test_list_requires_name_and_client(self):
        result = validate_material_list({})
        assert result.errors == ["Material list name is required", "Client is required"]

    def test_item_requires_material(self):
        result = validate_material_list_item(MaterialListItem(name="Cable", quantity=2, unit_price=3))
        assert result.errors == ["Material is required"]

    def test_valid_item(self):
        item = MaterialListItem(name="Cable", material_id="m1", quantity=2, unit_price=3)
        assert validate_material_list_item(item).is_valid


class TestCatalogRules:
    def test_material(self):
        result = validate_material({"name": "", "category": "", "price": 0, "unit": "BOX"})
        assert result.errors == [
            "Material name is required",
            "Category is required",
            "Price must be greater than zero",
            "Invalid unit. Use: UNIT or METER",
        ]

    def test_service_requires_unit(self):
        result = validate_service({"name": "Install", "price": 80})
        assert result.errors == ["Unit is required"]

    def test_valid_service(self):
        assert validate_service({"name": "Install", "price": 80, "unit": "METER"}).is_valid


class TestClientRules:
    @pytest.fixture
    def client_data(self) -> dict:
        return {
            "fullName": "Maria Souza",
            "phone": "(11) 98765-4321",
            "email": "maria@example.com",
            "cep": "01310-100",
            "street": "Av. Paulista",
            "number": "1000",
            "neighborhood": "Bela Vista",
            "city": "Sao Paulo",
            "state": "SP",
        }

    def test_valid(self, client_data):
        assert validate_client(client_data).is_valid

    def test_short_phone_and_bad_state(self, client_data):
        client_data.update(phone="1234", state="Sao Paulo")
        assert validate_client(client_data).errors == [
            "Phone must have at least 10 digits",
            "State must be a 2-letter code",
        ]

    def test_email_optional_but_checked(self, client_data):
        client_data["email"] = ""
        assert validate_client(client_data).is_valid
        client_data["email"] = "not-an-email"
        assert validate_client(client_data).errors == ["Email must be a valid address"]


class TestPasswordRules:
    def test_required(self):
        assert validate_password("", "").errors == ["Password is required"]

    def test_too_short_and_mismatch(self):
        assert validate_password("abc", "abd").errors == [
            "Password must have at least 6 characters",
            "Passwords do not match",
        ]

    def test_valid(self):
        assert validate_password("secret1", "secret1").is_valid


class TestParseDate:
    def test_naive_treated_as_utc(self):
        assert parse_date("2025-01-02") == datetime(2025, 1, 2, tzinfo=UTC)

    def test_zulu_suffix(self):
        assert parse_date("2025-01-02T03:04:05Z") == datetime(2025, 1, 2, 3, 4, 5, tzinfo=UTC)

    def test_garbage(self):
        assert parse_date("tomorrow") is None
