"""Service catalog: the billable services a professional offers."""

from collections.abc import Mapping
from typing import Any

from quotewire.config import get_logger
from quotewire.core.entities.catalog import Service
from quotewire.core.exceptions import RemoteError, ValidationError
from quotewire.core.interfaces.api_client import IApiClient
from quotewire.core.services.local_cache import LocalCache, starts_with
from quotewire.core.services.payloads import to_payload, unwrap_list, unwrap_object
from quotewire.core.services.validation import validate_service

logger = get_logger(__name__)

DEFAULT_SERVICE_CATEGORIES = [
    "Electrical Installation",
    "Maintenance",
    "Electrical Design",
    "Automation",
    "Lighting",
    "Lightning Protection",
    "Solar Energy",
    "Other",
]

_LIST_KEY = "services_list"
_CATEGORIES_KEY = "services_categories"
_READ_ONLY = {"id", "professional_id", "created_at", "updated_at"}


class ServiceCatalogService:
    """CRUD and lookups over the professional's service catalog."""

    def __init__(self, api: IApiClient, cache: LocalCache):
        self._api = api
        self._cache = cache

    async def invalidate_cache(self) -> int:
        return await self._cache.invalidate(starts_with("services_"))

    async def create(self, data: Service | Mapping[str, Any]) -> Service:
        result = validate_service(data)
        if not result.is_valid:
            raise ValidationError(result.errors, entity="service")

        try:
            payload = await self._api.post("/services", to_payload(data, exclude=_READ_ONLY))
        except RemoteError as e:
            raise e.with_prefix("Failed to create service") from e

        await self.invalidate_cache()
        service = Service.model_validate(unwrap_object(payload, "service"))
        logger.info("service_created", id=service.id, name=service.name)
        return service

    async def list_all(self, force_refresh: bool = False) -> list[Service]:
        async def fetch() -> Any:
            return unwrap_list(await self._api.get("/services"), "services", "data")

        try:
            rows = await self._cache.read_through(_LIST_KEY, fetch, use_cached=not force_refresh)
        except RemoteError as e:
            raise e.with_prefix("Failed to list services") from e
        return [Service.model_validate(row) for row in unwrap_list(rows)]

    async def get(self, service_id: str) -> Service:
        try:
            payload = await self._api.get(f"/services/{service_id}")
        except RemoteError as e:
            raise e.with_prefix("Failed to fetch service") from e
        return Service.model_validate(unwrap_object(payload, "service"))

    async def update(self, service_id: str, data: Service | Mapping[str, Any]) -> Service:
        try:
            payload = await self._api.put(
                f"/services/{service_id}", to_payload(data, exclude=_READ_ONLY)
            )
        except RemoteError as e:
            raise e.with_prefix("Failed to update service") from e

        await self.invalidate_cache()
        return Service.model_validate(unwrap_object(payload, "service"))

    async def delete(self, service_id: str) -> None:
        try:
            await self._api.delete(f"/services/{service_id}")
        except RemoteError as e:
            raise e.with_prefix("Failed to delete service") from e

        await self.invalidate_cache()
        logger.info("service_deleted", id=service_id)

    async def categories(self) -> list[str]:
        """Backend categories, else the last cached list, else the defaults."""

        async def fetch() -> Any:
            return unwrap_list(
                await self._api.get("/services/categories"), "categories", "data"
            )

        try:
            return list(await self._cache.read_through(_CATEGORIES_KEY, fetch))
        except RemoteError as e:
            logger.warning("service_categories_defaulted", error=e.message)
            return list(DEFAULT_SERVICE_CATEGORIES)

    async def get_by_category(self, category: str) -> list[Service]:
        return [s for s in await self.list_all() if s.category == category]

    async def search(self, term: str) -> list[Service]:
        """Case-insensitive match on name, description or category."""
        needle = term.lower()
        return [
            s
            for s in await self.list_all()
            if needle in s.name.lower()
            or (s.description and needle in s.description.lower())
            or (s.category and needle in s.category.lower())
        ]
