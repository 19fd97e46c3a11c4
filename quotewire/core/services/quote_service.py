"""
Shared orchestration for budgets and material lists.

Both entity families expose the same REST shape and the same cache
discipline: reads go through the local cache with stale fallback,
writes invalidate every cache entry that could hold the entity before
returning. Subclasses supply the resource names, models and rules.
"""

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, ClassVar, Generic, TypeVar

from quotewire.config import get_logger
from quotewire.core.entities.common import QueryFilters, QuoteStatus, WireModel
from quotewire.core.entities.validation import ValidationResult
from quotewire.core.exceptions import RemoteError, ValidationError
from quotewire.core.interfaces.api_client import IApiClient
from quotewire.core.services.local_cache import LocalCache, any_of, starts_with
from quotewire.core.services.payloads import to_payload, unwrap_list
from quotewire.core.services.status import requires_reopen, status_after_edit

logger = get_logger(__name__)

EntityT = TypeVar("EntityT", bound=WireModel)
ItemT = TypeVar("ItemT", bound=WireModel)
FiltersT = TypeVar("FiltersT", bound=QueryFilters)

_ITEM_READ_ONLY = {"id", "total_price", "service", "material"}
_ENTITY_READ_ONLY = {"id", "created_at", "updated_at", "total_value", "access_link"}


@dataclass
class ItemCopyFailure:
    """An item that could not be copied onto a duplicate."""

    index: int
    item_name: str | None
    error: str


@dataclass
class DuplicationResult(Generic[EntityT, ItemT]):
    """
    Outcome of a client-side duplicate.

    Items are copied one by one and never rolled back, so a duplicate
    may hold only part of the source items; ``failures`` says which.
    """

    entity: EntityT
    copied_items: list[ItemT] = field(default_factory=list)
    failures: list[ItemCopyFailure] = field(default_factory=list)

    @property
    def is_partial(self) -> bool:
        return bool(self.failures)


class QuoteService(ABC, Generic[EntityT, ItemT, FiltersT]):
    """
    CRUD, item management and duplication for one quote family.

    Cache keys:
        ``{list_key}_{filters-json}`` for list reads,
        ``{detail_key}_{id}`` for detail reads.
    ``detail_key`` is a prefix of ``list_key`` so one prefix match
    clears the whole family.
    """

    resource: ClassVar[str]
    public_segment: ClassVar[str]
    list_key: ClassVar[str]
    detail_key: ClassVar[str]
    label: ClassVar[str]
    entity_model: type[EntityT]
    item_model: type[ItemT]
    filters_model: type[FiltersT]

    def __init__(self, api: IApiClient, cache: LocalCache):
        self._api = api
        self._cache = cache

    # ------------------------------------------------------------------
    # Rules supplied by subclasses
    # ------------------------------------------------------------------

    @abstractmethod
    def validate(self, data: Any) -> ValidationResult:
        """Validation rules for the entity."""

    @abstractmethod
    def validate_item(self, data: Any) -> ValidationResult:
        """Validation rules for one item."""

    @abstractmethod
    def _duplicate_payload(self, source: EntityT, new_name: str) -> EntityT:
        """New entity carrying over the source's name-independent fields."""

    @abstractmethod
    def _copy_item(self, item: ItemT) -> ItemT:
        """Item payload reproducing a source item on another entity."""

    @abstractmethod
    async def _fetch_public(self, access_link: str, entity_id: str) -> EntityT:
        """Load an entity through a client's public access link."""

    # ------------------------------------------------------------------
    # Cache keys
    # ------------------------------------------------------------------

    def _list_cache_key(self, filters: FiltersT) -> str:
        return f"{self.list_key}_{filters.cache_fragment()}"

    def _detail_cache_key(self, entity_id: str) -> str:
        return f"{self.detail_key}_{entity_id}"

    async def invalidate_cache(self) -> int:
        """Drop every cached list and detail of this family."""
        return await self._cache.invalidate(starts_with(self.detail_key))

    async def invalidate_entity_cache(self, entity_id: str) -> int:
        """Drop cached reads that may hold entity_id: its details and every list."""
        return await self._cache.invalidate(
            any_of(
                starts_with(f"{self.list_key}_"),
                lambda key: key.startswith(self.detail_key) and entity_id in key,
            )
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_all(self, filters: FiltersT | None = None) -> list[EntityT]:
        """
        List entities matching filters (AND-combined).

        The client filter is re-applied locally in case the backend
        ignored it.
        """
        filters = filters or self.filters_model()
        key = self._list_cache_key(filters)

        async def fetch() -> Any:
            return await self._api.get(f"/{self.resource}", params=filters.to_params() or None)

        try:
            payload = await self._cache.read_through(key, fetch)
        except RemoteError as e:
            raise e.with_prefix(f"Failed to list {self.label}s") from e

        rows = unwrap_list(payload, self.list_key, "data")
        entities = [self.entity_model.model_validate(row) for row in rows]
        client_id = getattr(filters, "client_id", None)
        if client_id:
            entities = [e for e in entities if getattr(e, "client_id", None) == client_id]
        return entities

    async def get(self, entity_id: str) -> EntityT:
        """Fetch one entity with its items."""

        async def fetch() -> Any:
            return await self._api.get(f"/{self.resource}/{entity_id}")

        try:
            payload = await self._cache.read_through(self._detail_cache_key(entity_id), fetch)
        except RemoteError as e:
            raise e.with_prefix(f"Failed to fetch {self.label}") from e
        return self.entity_model.model_validate(payload)

    async def get_by_client(self, client_id: str) -> list[EntityT]:
        """Entities of one client, falling back to filtering the full list."""
        try:
            return await self.list_all(self.filters_model(client_id=client_id))
        except RemoteError:
            logger.warning("client_filter_failed", resource=self.resource, client_id=client_id)
            entities = await self.list_all()
            return [e for e in entities if getattr(e, "client_id", None) == client_id]

    async def get_by_status(self, status: QuoteStatus) -> list[EntityT]:
        return await self.list_all(self.filters_model(status=status))

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def _require_valid(self, result: ValidationResult, entity: str) -> None:
        if not result.is_valid:
            logger.info("validation_rejected", entity=entity, errors=result.errors)
            raise ValidationError(result.errors, entity=entity)

    async def create(self, data: EntityT) -> EntityT:
        """Validate locally, create remotely, then clear the family's caches."""
        self._require_valid(self.validate(data), self.label)
        try:
            payload = await self._api.post(
                f"/{self.resource}", to_payload(data, exclude=_ENTITY_READ_ONLY)
            )
        except RemoteError as e:
            raise e.with_prefix(f"Failed to create {self.label}") from e

        await self.invalidate_cache()
        created = self.entity_model.model_validate(payload)
        logger.info(f"{self.detail_key}_created", id=getattr(created, "id", None))
        return created

    async def _reopen_if_decided(self, entity_id: str) -> None:
        """
        Move an approved or rejected entity back to PENDING before an edit.

        The reopen is a write of its own, so cached reads of the entity
        are dropped as soon as it lands, even if the edit that follows
        fails.
        """
        current = await self.get(entity_id)
        previous = getattr(current, "status", None)
        if not requires_reopen(previous):
            return

        await self._api.patch(
            f"/{self.resource}/{entity_id}/status",
            {"status": status_after_edit(previous).value},
        )
        await self.invalidate_entity_cache(entity_id)
        logger.info(
            "quote_reopened",
            resource=self.resource,
            id=entity_id,
            previous_status=previous.value,
        )

    async def update(self, entity_id: str, data: Mapping[str, Any] | EntityT) -> EntityT:
        """Partially update an entity."""
        body = to_payload(data, exclude=_ENTITY_READ_ONLY)
        try:
            if "status" not in body:
                await self._reopen_if_decided(entity_id)
            payload = await self._api.put(f"/{self.resource}/{entity_id}", body)
        except RemoteError as e:
            raise e.with_prefix(f"Failed to update {self.label}") from e

        await self.invalidate_entity_cache(entity_id)
        return self.entity_model.model_validate(payload)

    async def update_status(self, entity_id: str, status: QuoteStatus) -> EntityT:
        """Set the status explicitly."""
        try:
            payload = await self._api.patch(
                f"/{self.resource}/{entity_id}/status", {"status": QuoteStatus(status).value}
            )
        except RemoteError as e:
            raise e.with_prefix("Failed to update status") from e

        await self.invalidate_entity_cache(entity_id)
        logger.info("quote_status_changed", resource=self.resource, id=entity_id, status=status)
        return self.entity_model.model_validate(payload)

    async def delete(self, entity_id: str) -> None:
        try:
            await self._api.delete(f"/{self.resource}/{entity_id}")
        except RemoteError as e:
            raise e.with_prefix(f"Failed to delete {self.label}") from e

        await self.invalidate_entity_cache(entity_id)
        logger.info(f"{self.detail_key}_deleted", id=entity_id)

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def add_item(
        self,
        entity_id: str,
        item: ItemT,
        *,
        current_status: QuoteStatus | None = None,
    ) -> ItemT:
        """
        Append an item; the backend recomputes totals.

        Pass current_status when the caller already knows it to skip
        the reopen check.
        """
        self._require_valid(self.validate_item(item), f"{self.label} item")
        try:
            if current_status is None:
                await self._reopen_if_decided(entity_id)
            payload = await self._api.post(
                f"/{self.resource}/{entity_id}/items", to_payload(item, exclude=_ITEM_READ_ONLY)
            )
        except RemoteError as e:
            raise e.with_prefix("Failed to add item") from e

        await self.invalidate_entity_cache(entity_id)
        return self.item_model.model_validate(payload)

    async def update_item(
        self, entity_id: str, item_id: str, data: Mapping[str, Any] | ItemT
    ) -> ItemT:
        try:
            await self._reopen_if_decided(entity_id)
            payload = await self._api.put(
                f"/{self.resource}/{entity_id}/items/{item_id}",
                to_payload(data, exclude=_ITEM_READ_ONLY),
            )
        except RemoteError as e:
            raise e.with_prefix("Failed to update item") from e

        await self.invalidate_entity_cache(entity_id)
        return self.item_model.model_validate(payload)

    async def remove_item(self, entity_id: str, item_id: str) -> None:
        try:
            await self._reopen_if_decided(entity_id)
            await self._api.delete(f"/{self.resource}/{entity_id}/items/{item_id}")
        except RemoteError as e:
            raise e.with_prefix("Failed to remove item") from e

        await self.invalidate_entity_cache(entity_id)

    # ------------------------------------------------------------------
    # Duplication
    # ------------------------------------------------------------------

    async def _copy_items(
        self, target_id: str, items: list[ItemT]
    ) -> tuple[list[ItemT], list[ItemCopyFailure]]:
        """Add items to target one at a time, in order, collecting failures."""
        copied: list[ItemT] = []
        failures: list[ItemCopyFailure] = []
        for index, item in enumerate(items):
            try:
                added = await self.add_item(
                    target_id, self._copy_item(item), current_status=QuoteStatus.PENDING
                )
            except (RemoteError, ValidationError) as e:
                failures.append(
                    ItemCopyFailure(
                        index=index,
                        item_name=getattr(item, "name", None),
                        error=e.message,
                    )
                )
                logger.warning(
                    "item_copy_failed",
                    resource=self.resource,
                    target_id=target_id,
                    index=index,
                    error=e.message,
                )
                continue
            copied.append(added)
        return copied, failures

    async def duplicate(
        self, source_id: str, new_name: str
    ) -> DuplicationResult[EntityT, ItemT]:
        """
        Copy an entity and its items under a new name, reset to PENDING.

        Items are copied sequentially to keep their order. A failing item
        is skipped and reported; nothing is rolled back. The returned
        entity is re-fetched so its totals come from the backend.
        """
        try:
            source = await self.get(source_id)
            created = await self.create(self._duplicate_payload(source, new_name))
            copied, failures = await self._copy_items(created.id, list(source.items))
            entity = await self.get(created.id)
        except RemoteError as e:
            raise e.with_prefix(f"Failed to duplicate {self.label}") from e

        logger.info(
            f"{self.detail_key}_duplicated",
            source_id=source_id,
            new_id=created.id,
            copied=len(copied),
            failed=len(failures),
        )
        return DuplicationResult(entity=entity, copied_items=copied, failures=failures)

    # ------------------------------------------------------------------
    # Public access link
    # ------------------------------------------------------------------

    async def get_by_public_link(self, access_link: str, entity_id: str) -> EntityT:
        """Load an entity the way the client sees it through the shared link."""
        try:
            return await self._fetch_public(access_link, entity_id)
        except RemoteError as e:
            raise e.with_prefix(f"Failed to fetch {self.label}") from e

    async def update_status_by_public_link(
        self,
        access_link: str,
        entity_id: str,
        status: QuoteStatus,
        client_notes: str | None = None,
    ) -> None:
        """Record the client's approval or rejection."""
        status = QuoteStatus(status)
        if status not in (QuoteStatus.APPROVED, QuoteStatus.REJECTED):
            raise ValidationError(
                ["A client decision must be APPROVED or REJECTED"], entity=self.label
            )

        action = "approve" if status is QuoteStatus.APPROVED else "reject"
        body = {"clientNotes": client_notes} if client_notes else {}
        try:
            await self._api.post(
                f"/public/{access_link}/{self.public_segment}/{entity_id}/{action}",
                body,
                auth=False,
            )
        except RemoteError as e:
            raise e.with_prefix("Failed to update status") from e

        await self.invalidate_entity_cache(entity_id)
        logger.info("quote_decided_by_client", resource=self.resource, id=entity_id, status=status)
