"""
Material list service.

Material lists share the quote lifecycle with budgets and can be
derived from a budget's material-backed items.
"""

from typing import Any

from quotewire.config import get_logger
from quotewire.core.entities.budget import Budget, ItemsByType
from quotewire.core.entities.common import QuoteStatus
from quotewire.core.entities.material_list import (
    MaterialList,
    MaterialListFilters,
    MaterialListItem,
    MaterialListPublicStatus,
    MaterialListSummary,
)
from quotewire.core.entities.validation import ValidationResult
from quotewire.core.exceptions import RemoteError
from quotewire.core.services import pricing
from quotewire.core.services.quote_service import DuplicationResult, QuoteService
from quotewire.core.services.validation import (
    validate_material_list,
    validate_material_list_item,
)

logger = get_logger(__name__)


class MaterialListService(QuoteService[MaterialList, MaterialListItem, MaterialListFilters]):
    """Material lists of the signed-in professional."""

    resource = "materialBudget"
    public_segment = "material-lists"
    list_key = "materialLists"
    detail_key = "materialList"
    label = "material list"
    entity_model = MaterialList
    item_model = MaterialListItem
    filters_model = MaterialListFilters

    def validate(self, data: Any) -> ValidationResult:
        return validate_material_list(data)

    def validate_item(self, data: Any) -> ValidationResult:
        return validate_material_list_item(data)

    def _duplicate_payload(self, source: MaterialList, new_name: str) -> MaterialList:
        return MaterialList(
            name=new_name,
            client_id=source.client_id,
            budget_id=source.budget_id,
            status=QuoteStatus.PENDING,
            notes=source.notes or "",
        )

    def _copy_item(self, item: MaterialListItem) -> MaterialListItem:
        return MaterialListItem(
            material_id=item.material_id,
            name=item.name or (item.material.name if item.material else None),
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            unit=item.unit,
        )

    async def _fetch_public(self, access_link: str, entity_id: str) -> MaterialList:
        payload = await self._api.get(
            f"/public/{access_link}/material-lists/{entity_id}", auth=False
        )
        return MaterialList.model_validate(payload)

    async def get_status_by_public_link(
        self, access_link: str, material_list_id: str
    ) -> MaterialListPublicStatus:
        material_list = await self.get_by_public_link(access_link, material_list_id)
        return MaterialListPublicStatus(
            material_list_id=material_list.id or material_list_id,
            status=material_list.status or QuoteStatus.PENDING,
            name=material_list.name,
            total_value=material_list.total_value,
            updated_at=material_list.updated_at,
        )

    async def get_by_budget(self, budget_id: str) -> list[MaterialList]:
        return await self.list_all(MaterialListFilters(budget_id=budget_id))

    async def create_from_budget(
        self, budget_id: str, name: str | None = None
    ) -> DuplicationResult[MaterialList, MaterialListItem]:
        """
        Start a material list from a budget, copying its material items.

        Service-only items are left out. Item failures are reported the
        same way as for duplicate.
        """
        try:
            budget = Budget.model_validate(await self._api.get(f"/budgets/{budget_id}"))
            created = await self.create(
                MaterialList(
                    name=name or f"Material list - {budget.name}",
                    client_id=budget.client_id,
                    budget_id=budget.id,
                    notes=f"Created from budget: {budget.name}",
                )
            )
            material_items = [
                MaterialListItem(
                    material_id=item.material_id,
                    name=item.display_name,
                    description=item.description,
                    quantity=item.quantity,
                    unit_price=item.unit_price,
                    unit=item.unit,
                )
                for item in budget.items
                if item.material_id
            ]
            copied, failures = await self._copy_items(created.id, material_items)
            material_list = await self.get(created.id)
        except RemoteError as e:
            raise e.with_prefix("Failed to create material list") from e

        logger.info(
            "material_list_created_from_budget",
            budget_id=budget_id,
            material_list_id=created.id,
            copied=len(copied),
            failed=len(failures),
        )
        return DuplicationResult(entity=material_list, copied_items=copied, failures=failures)

    def summary(self, material_list: MaterialList) -> MaterialListSummary:
        """Summarize loaded items; never fetches."""
        items = material_list.items
        total_value = pricing.subtotal(items)
        return MaterialListSummary(
            total_items=len(items),
            total_value=total_value,
            total_quantity=sum(i.quantity for i in items),
            items_by_type=ItemsByType(services=0, materials=sum(1 for i in items if i.material_id)),
            average_item_value=total_value / len(items) if items else 0.0,
        )
