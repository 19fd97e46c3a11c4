"""
Service factory for dependency injection.

Wires infrastructure implementations to core services. Each call builds
a fresh container; callers own its lifetime and close it when done.

Clean Architecture: Application layer orchestrates DI, not core layer.
"""

from dataclasses import dataclass

import httpx

from quotewire.config import Settings, get_logger, get_settings
from quotewire.core.interfaces import IKeyValueStore
from quotewire.core.services import (
    AuthService,
    BudgetService,
    ClientService,
    LocalCache,
    MaterialListService,
    MaterialService,
    ServiceCatalogService,
)
from quotewire.infrastructure.http import HttpApiClient, TokenManager
from quotewire.infrastructure.storage import InMemoryKeyValueStore, SQLiteKeyValueStore

logger = get_logger(__name__)


@dataclass
class ServiceContainer:
    """Every domain service sharing one HTTP client, store and cache."""

    settings: Settings
    store: IKeyValueStore
    tokens: TokenManager
    api: HttpApiClient
    cache: LocalCache
    auth: AuthService
    budgets: BudgetService
    material_lists: MaterialListService
    materials: MaterialService
    services: ServiceCatalogService
    clients: ClientService

    async def aclose(self) -> None:
        """Release the HTTP client and the store connection."""
        await self.api.close()
        if isinstance(self.store, SQLiteKeyValueStore):
            await self.store.close()


def create_store(settings: Settings) -> IKeyValueStore:
    """Key-value store selected by ``CACHE_BACKEND``."""
    if settings.cache.backend == "memory":
        return InMemoryKeyValueStore()
    return SQLiteKeyValueStore(settings.cache.db_path)


def build_services(
    settings: Settings | None = None,
    store: IKeyValueStore | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> ServiceContainer:
    """
    Build the full service graph.

    Args:
        settings: Optional settings override (defaults to environment)
        store: Optional key-value store override
        transport: Optional httpx transport override

    Returns:
        Configured ServiceContainer
    """
    settings = settings or get_settings()
    store = store or create_store(settings)

    tokens = TokenManager(
        store,
        refresh_threshold_seconds=settings.auth.refresh_threshold_seconds,
        refreshed_token_hours=settings.auth.refreshed_token_hours,
    )
    api = HttpApiClient(
        settings.api.base_url,
        tokens,
        timeout=settings.api.timeout,
        transport=transport,
    )
    cache = LocalCache(
        store,
        ttl_seconds=settings.cache.ttl_seconds,
        key_prefix=settings.cache.key_prefix,
    )

    logger.info(
        "services_built",
        base_url=settings.api.base_url,
        store=type(store).__name__,
        ttl_seconds=settings.cache.ttl_seconds,
    )

    return ServiceContainer(
        settings=settings,
        store=store,
        tokens=tokens,
        api=api,
        cache=cache,
        auth=AuthService(
            api, tokens, store, login_token_days=settings.auth.login_token_days
        ),
        budgets=BudgetService(api, cache),
        material_lists=MaterialListService(api, cache),
        materials=MaterialService(api, cache),
        services=ServiceCatalogService(api, cache),
        clients=ClientService(api),
    )
