"""
Material catalog service.

The catalog list, usage stats and category list are cached together
and dropped together whenever the catalog changes.
"""

import asyncio
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any
from urllib.parse import quote

from quotewire.config import get_logger
from quotewire.core.entities.catalog import Material, MaterialsStats
from quotewire.core.exceptions import RemoteError, ValidationError
from quotewire.core.interfaces.api_client import IApiClient
from quotewire.core.services.local_cache import LocalCache, starts_with
from quotewire.core.services.payloads import to_payload, unwrap_list
from quotewire.core.services.validation import validate_material

logger = get_logger(__name__)

DEFAULT_MATERIAL_CATEGORIES = [
    "Wires and Cables",
    "Circuit Breakers",
    "Outlets and Switches",
    "Lamps",
    "Conduits",
    "Distribution Boards",
    "Tools",
    "Other",
]

_LIST_KEY = "materials_list"
_STATS_KEY = "materials_stats"
_CATEGORIES_KEY = "materials_categories"
_READ_ONLY = {"id", "professional_id", "created_at", "updated_at", "usage"}


@dataclass
class MaterialCatalogSnapshot:
    """Everything the catalog screen shows, refreshed at once."""

    materials: list[Material]
    stats: MaterialsStats
    categories: list[str]


class MaterialService:
    """CRUD and lookups over the professional's material catalog."""

    def __init__(self, api: IApiClient, cache: LocalCache):
        self._api = api
        self._cache = cache

    async def invalidate_cache(self) -> int:
        return await self._cache.invalidate(starts_with("materials_"))

    async def create(self, data: Material | Mapping[str, Any]) -> Material:
        result = validate_material(data)
        if not result.is_valid:
            raise ValidationError(result.errors, entity="material")

        try:
            payload = await self._api.post("/materials", to_payload(data, exclude=_READ_ONLY))
        except RemoteError as e:
            raise e.with_prefix("Failed to create material") from e

        await self.invalidate_cache()
        material = Material.model_validate(payload)
        logger.info("material_created", id=material.id, name=material.name)
        return material

    async def list_all(self, force_refresh: bool = False) -> list[Material]:
        """Catalog materials; stale cache is served when the backend fails."""

        async def fetch() -> Any:
            return unwrap_list(await self._api.get("/materials"), "materials", "data")

        try:
            rows = await self._cache.read_through(_LIST_KEY, fetch, use_cached=not force_refresh)
        except RemoteError as e:
            raise e.with_prefix("Failed to list materials") from e
        return [Material.model_validate(row) for row in unwrap_list(rows)]

    async def get(self, material_id: str) -> Material:
        try:
            payload = await self._api.get(f"/materials/{material_id}")
        except RemoteError as e:
            raise e.with_prefix("Material not found") from e
        return Material.model_validate(payload)

    async def update(self, material_id: str, data: Material | Mapping[str, Any]) -> Material:
        try:
            payload = await self._api.put(
                f"/materials/{material_id}", to_payload(data, exclude=_READ_ONLY)
            )
        except RemoteError as e:
            raise e.with_prefix("Failed to update material") from e

        await self.invalidate_cache()
        return Material.model_validate(payload)

    async def delete(self, material_id: str) -> None:
        try:
            await self._api.delete(f"/materials/{material_id}")
        except RemoteError as e:
            raise e.with_prefix("Failed to delete material") from e

        await self.invalidate_cache()
        logger.info("material_deleted", id=material_id)

    async def stats(self, force_refresh: bool = False) -> MaterialsStats:
        """Usage counts across budgets and material lists."""

        async def fetch() -> Any:
            return await self._api.get("/materials/stats/usage")

        try:
            payload = await self._cache.read_through(
                _STATS_KEY, fetch, use_cached=not force_refresh
            )
        except RemoteError as e:
            raise e.with_prefix("Failed to load material stats") from e
        return MaterialsStats.model_validate(payload)

    async def get_by_category(self, category: str) -> list[Material]:
        try:
            payload = await self._api.get(f"/materials/category/{quote(category, safe='')}")
        except RemoteError as e:
            raise e.with_prefix("Failed to list materials by category") from e
        return [Material.model_validate(row) for row in unwrap_list(payload, "materials", "data")]

    async def search(self, term: str) -> list[Material]:
        try:
            payload = await self._api.get("/materials/search/all", params={"q": term})
        except RemoteError as e:
            raise e.with_prefix("Failed to search materials") from e
        return [Material.model_validate(row) for row in unwrap_list(payload, "materials", "data")]

    async def categories(self) -> list[str]:
        """
        Distinct, sorted categories used in the catalog.

        Falls back to the default category list when the catalog cannot
        be loaded at all.
        """
        cached = await self._cache.get(_CATEGORIES_KEY)
        if cached is not None and self._cache.is_valid(cached.timestamp):
            return list(cached.data)

        try:
            materials = await self.list_all()
        except RemoteError as e:
            logger.warning("material_categories_defaulted", error=e.message)
            return list(DEFAULT_MATERIAL_CATEGORIES)

        names = sorted({m.category.strip() for m in materials if m.category and m.category.strip()})
        await self._cache.set(_CATEGORIES_KEY, names)
        return names

    async def refresh_all(self) -> MaterialCatalogSnapshot:
        """Reload list and stats bypassing the cache, then derive categories."""
        materials, stats = await asyncio.gather(
            self.list_all(force_refresh=True),
            self.stats(force_refresh=True),
        )
        await self._cache.remove(_CATEGORIES_KEY)
        categories = await self.categories()
        return MaterialCatalogSnapshot(materials=materials, stats=stats, categories=categories)
