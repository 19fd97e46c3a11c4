"""
Core business logic services.

Layer-pure services that depend only on:
- quotewire/core/entities/*
- quotewire/core/interfaces/*
- quotewire/core/exceptions.py

NO infrastructure imports. All dependencies injected via constructor.
"""

from quotewire.core.services.auth_service import AuthService
from quotewire.core.services.budget_service import BudgetService
from quotewire.core.services.client_service import ClientService
from quotewire.core.services.local_cache import LocalCache
from quotewire.core.services.material_list_service import MaterialListService
from quotewire.core.services.material_service import MaterialCatalogSnapshot, MaterialService
from quotewire.core.services.pricing import PricingBreakdown, calculate_totals
from quotewire.core.services.quote_service import (
    DuplicationResult,
    ItemCopyFailure,
    QuoteService,
)
from quotewire.core.services.service_catalog import ServiceCatalogService

__all__ = [
    # Pricing
    "PricingBreakdown",
    "calculate_totals",
    # Cache
    "LocalCache",
    # Quotes
    "QuoteService",
    "BudgetService",
    "MaterialListService",
    "DuplicationResult",
    "ItemCopyFailure",
    # Catalogs
    "MaterialService",
    "MaterialCatalogSnapshot",
    "ServiceCatalogService",
    # Clients
    "ClientService",
    # Auth
    "AuthService",
]
