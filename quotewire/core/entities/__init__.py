"""Core domain entities."""

from quotewire.core.entities.budget import (
    Budget,
    BudgetFilters,
    BudgetItem,
    BudgetPublicStatus,
    BudgetSummary,
    CatalogRef,
    ClientRef,
    ItemsByType,
)
from quotewire.core.entities.cache import CacheEntry
from quotewire.core.entities.catalog import Material, MaterialsStats, Service, UsageCount
from quotewire.core.entities.client import Client, ClientStats
from quotewire.core.entities.common import DiscountType, QuoteStatus, Unit, WireModel
from quotewire.core.entities.material_list import (
    MaterialList,
    MaterialListFilters,
    MaterialListItem,
    MaterialListPublicStatus,
    MaterialListSummary,
    MaterialRef,
)
from quotewire.core.entities.user import LoginResult, UserInfo
from quotewire.core.entities.validation import ValidationResult

__all__ = [
    # Shared
    "WireModel",
    "QuoteStatus",
    "DiscountType",
    "Unit",
    # Budget entities
    "Budget",
    "BudgetItem",
    "BudgetFilters",
    "BudgetSummary",
    "BudgetPublicStatus",
    "CatalogRef",
    "ClientRef",
    "ItemsByType",
    # Material list entities
    "MaterialList",
    "MaterialListItem",
    "MaterialListFilters",
    "MaterialListSummary",
    "MaterialListPublicStatus",
    "MaterialRef",
    # Catalog entities
    "Material",
    "MaterialsStats",
    "Service",
    "UsageCount",
    # Client entities
    "Client",
    "ClientStats",
    # Auth entities
    "UserInfo",
    "LoginResult",
    # Cache / validation
    "CacheEntry",
    "ValidationResult",
]
