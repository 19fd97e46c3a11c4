"""
Budget (quote) domain entities.

A budget is an ordered list of priced service/material line items
presented to a client, with an optional discount.
"""

from datetime import datetime

from pydantic import Field

from quotewire.core.entities.common import (
    DiscountType,
    QueryFilters,
    QuoteStatus,
    WireModel,
)


class CatalogRef(WireModel):
    """Nested catalog record (service or material) populated on items."""

    id: str
    name: str
    description: str | None = None
    price: float = 0.0
    unit: str | None = None
    category: str | None = None
    professional_id: str | None = None


class ClientRef(WireModel):
    """Nested client summary populated on budgets."""

    id: str
    full_name: str
    phone: str = ""
    email: str | None = None


class BudgetItem(WireModel):
    """A priced line on a budget, linked to a service or a material."""

    id: str | None = None
    service_id: str | None = None
    material_id: str | None = None
    name: str | None = None
    description: str | None = None
    quantity: float = 0.0
    unit_price: float = 0.0
    total_price: float | None = None
    unit: str | None = None
    service: CatalogRef | None = None
    material: CatalogRef | None = None

    @property
    def display_name(self) -> str | None:
        """Item name, falling back to the linked catalog record."""
        if self.name:
            return self.name
        if self.service is not None:
            return self.service.name
        if self.material is not None:
            return self.material.name
        return None


class Budget(WireModel):
    """A quote for electrician services."""

    id: str | None = None
    name: str
    client_id: str
    client_name: str | None = None
    status: QuoteStatus | None = None
    items: list[BudgetItem] = Field(default_factory=list)
    subtotal: float | None = None
    discount: float | None = None
    discount_type: DiscountType | None = None
    discount_reason: str | None = None
    total_value: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    valid_until: str | None = None
    notes: str | None = None
    access_link: str | None = None
    professional_id: str | None = None
    client: ClientRef | None = None


class BudgetFilters(QueryFilters):
    """Filters accepted by the budget list endpoint."""

    client_id: str | None = None
    status: QuoteStatus | None = None
    search: str | None = None
    date_from: str | None = None
    date_to: str | None = None


class ItemsByType(WireModel):
    """Count of service-backed vs material-backed items."""

    services: int = 0
    materials: int = 0


class BudgetSummary(WireModel):
    """Figures derived from already-loaded budget items."""

    total_items: int
    total_value: float
    items_by_type: ItemsByType
    average_item_value: float


class BudgetPublicStatus(WireModel):
    """Status view exposed through a client's public access link."""

    budget_id: str
    status: QuoteStatus
    name: str | None = None
    total_value: float | None = None
    valid_until: str | None = None
    updated_at: datetime | None = None
