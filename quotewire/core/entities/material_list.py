"""
Material list domain entities.

A material list is a parts quote for a client, optionally derived from
a budget.
"""

from datetime import datetime

from pydantic import Field

from quotewire.core.entities.budget import ItemsByType
from quotewire.core.entities.common import QueryFilters, QuoteStatus, WireModel


class MaterialRef(WireModel):
    """Nested material populated on list items."""

    id: str
    name: str
    category: str | None = None
    price: float = 0.0
    unit: str | None = None


class MaterialListItem(WireModel):
    """A priced material line on a material list."""

    id: str | None = None
    material_id: str | None = None
    name: str | None = None
    description: str | None = None
    quantity: float = 0.0
    unit_price: float = 0.0
    total_price: float | None = None
    unit: str | None = None
    material: MaterialRef | None = None


class MaterialList(WireModel):
    """A materials quote."""

    id: str | None = None
    name: str
    client_id: str
    client_name: str | None = None
    budget_id: str | None = None
    budget_name: str | None = None
    status: QuoteStatus | None = None
    items: list[MaterialListItem] = Field(default_factory=list)
    total_value: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    access_link: str | None = None
    notes: str | None = None


class MaterialListFilters(QueryFilters):
    """Filters accepted by the material list endpoint."""

    client_id: str | None = None
    status: QuoteStatus | None = None
    search: str | None = None
    date_from: str | None = None
    date_to: str | None = None
    budget_id: str | None = None


class MaterialListSummary(WireModel):
    """Figures derived from already-loaded material list items."""

    total_items: int
    total_value: float
    total_quantity: float
    items_by_type: ItemsByType
    average_item_value: float


class MaterialListPublicStatus(WireModel):
    """Status view exposed through a client's public access link."""

    material_list_id: str
    status: QuoteStatus
    name: str | None = None
    total_value: float | None = None
    updated_at: datetime | None = None
