"""
Budget (quote) service.

Adds discounts, budget-specific validation and summaries on top of the
shared quote orchestration.
"""

from typing import Any

from quotewire.config import get_logger
from quotewire.core.entities.budget import (
    Budget,
    BudgetFilters,
    BudgetItem,
    BudgetPublicStatus,
    BudgetSummary,
    ItemsByType,
)
from quotewire.core.entities.common import DiscountType, QuoteStatus
from quotewire.core.entities.validation import ValidationResult
from quotewire.core.exceptions import RemoteError
from quotewire.core.services import pricing
from quotewire.core.services.quote_service import QuoteService
from quotewire.core.services.status import is_expired
from quotewire.core.services.validation import validate_budget, validate_budget_item

logger = get_logger(__name__)


class BudgetService(QuoteService[Budget, BudgetItem, BudgetFilters]):
    """Budgets of the signed-in professional."""

    resource = "budgets"
    public_segment = "budgets"
    list_key = "budgets"
    detail_key = "budget"
    label = "budget"
    entity_model = Budget
    item_model = BudgetItem
    filters_model = BudgetFilters

    def validate(self, data: Any) -> ValidationResult:
        return validate_budget(data)

    def validate_item(self, data: Any) -> ValidationResult:
        return validate_budget_item(data)

    def _duplicate_payload(self, source: Budget, new_name: str) -> Budget:
        return Budget(
            name=new_name,
            client_id=source.client_id,
            status=QuoteStatus.PENDING,
            notes=source.notes or "",
            # A lapsed date would make the copy fail validation
            valid_until=None if is_expired(source.valid_until) else source.valid_until,
            discount=source.discount,
            discount_type=source.discount_type,
            discount_reason=source.discount_reason,
        )

    def _copy_item(self, item: BudgetItem) -> BudgetItem:
        return BudgetItem(
            service_id=item.service_id,
            material_id=item.material_id,
            name=item.display_name,
            description=item.description,
            quantity=item.quantity,
            unit_price=item.unit_price,
            unit=item.unit,
        )

    async def _fetch_public(self, access_link: str, entity_id: str) -> Budget:
        payload = await self._api.get(f"/public/{access_link}", auth=False)
        for row in payload.get("budgets", []):
            if row.get("id") == entity_id:
                return Budget.model_validate({"clientId": payload.get("id", ""), **row})
        raise RemoteError(f"Budget {entity_id} not found for this link", status_code=404)

    async def get_status_by_public_link(
        self, access_link: str, budget_id: str
    ) -> BudgetPublicStatus:
        budget = await self.get_by_public_link(access_link, budget_id)
        return BudgetPublicStatus(
            budget_id=budget.id or budget_id,
            status=budget.status or QuoteStatus.PENDING,
            name=budget.name,
            total_value=budget.total_value,
            valid_until=budget.valid_until,
            updated_at=budget.updated_at,
        )

    # ------------------------------------------------------------------
    # Discounts
    # ------------------------------------------------------------------

    async def apply_discount(
        self,
        budget_id: str,
        discount: float,
        discount_type: DiscountType,
        discount_reason: str | None = None,
    ) -> Budget:
        """Apply or replace the budget discount; the backend recomputes the total."""
        body: dict[str, Any] = {
            "discount": discount,
            "discountType": DiscountType(discount_type).value,
        }
        if discount_reason:
            body["discountReason"] = discount_reason

        try:
            await self._reopen_if_decided(budget_id)
            payload = await self._api.patch(f"/budgets/{budget_id}/discount", body)
        except RemoteError as e:
            raise e.with_prefix("Failed to apply discount") from e

        await self.invalidate_entity_cache(budget_id)
        logger.info("budget_discount_applied", id=budget_id, discount=discount, type=discount_type)
        return Budget.model_validate(payload)

    async def remove_discount(self, budget_id: str) -> Budget:
        try:
            await self._reopen_if_decided(budget_id)
            payload = await self._api.delete(f"/budgets/{budget_id}/discount")
        except RemoteError as e:
            raise e.with_prefix("Failed to remove discount") from e

        await self.invalidate_entity_cache(budget_id)
        logger.info("budget_discount_removed", id=budget_id)
        return Budget.model_validate(payload)

    # ------------------------------------------------------------------
    # Local figures
    # ------------------------------------------------------------------

    def calculate_totals(self, budget: Budget) -> pricing.PricingBreakdown:
        """Price the loaded items with the budget's discount."""
        return pricing.calculate_totals(budget.items, budget.discount, budget.discount_type)

    def summary(self, budget: Budget) -> BudgetSummary:
        """Summarize loaded items; never fetches."""
        items = budget.items
        total_value = pricing.subtotal(items)
        return BudgetSummary(
            total_items=len(items),
            total_value=total_value,
            items_by_type=ItemsByType(
                services=sum(1 for i in items if i.service_id),
                materials=sum(1 for i in items if i.material_id),
            ),
            average_item_value=total_value / len(items) if items else 0.0,
        )
