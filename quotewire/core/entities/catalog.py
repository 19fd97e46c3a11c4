"""
Catalog entities: materials and services owned by a professional.
"""

from datetime import datetime

from pydantic import Field

from quotewire.core.entities.common import Unit, WireModel


class UsageCount(WireModel):
    """How many quote lines reference a material."""

    budget_items: int = 0
    material_list_items: int = 0


class Material(WireModel):
    """A material in the professional's catalog."""

    id: str | None = None
    name: str
    category: str = ""
    price: float = 0.0
    unit: Unit = Unit.UNIT
    professional_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    usage: UsageCount | None = Field(default=None, alias="_count")


class MaterialsStats(WireModel):
    """Usage statistics for the material catalog."""

    total_materials: int = 0
    materials_with_usage: int = 0
    total_usage_in_budgets: int = 0
    total_usage_in_material_lists: int = 0
    materials: list[Material] = Field(default_factory=list)


class Service(WireModel):
    """A billable service in the professional's catalog."""

    id: str | None = None
    name: str
    description: str | None = None
    price: float = 0.0
    unit: Unit = Unit.UNIT
    category: str | None = None
    professional_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
