"""
Pricing engine for budgets and material lists.

Pure, side-effect-free arithmetic over line items. Positivity of
quantities and prices is enforced by the validation rules; this module
only refuses non-finite numbers.
"""

import math
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Protocol

from quotewire.core.entities.common import DiscountType
from quotewire.core.exceptions import ValidationError


class PricedLine(Protocol):
    """Anything with a quantity and a unit price."""

    quantity: float
    unit_price: float


@dataclass(frozen=True)
class PricingBreakdown:
    """Subtotal, applied discount and final total of a quote."""

    subtotal: float
    discount_value: float
    total: float


def _require_finite(name: str, value: float) -> float:
    if value is None or not math.isfinite(value):
        raise ValidationError([f"{name} must be a finite number"], entity="pricing")
    return value


def item_total(quantity: float, unit_price: float) -> float:
    """Total price of one line."""
    _require_finite("quantity", quantity)
    _require_finite("unit_price", unit_price)
    return quantity * unit_price


def subtotal(items: Iterable[PricedLine]) -> float:
    """
    Sum of all line totals.

    Uses an exactly rounded sum so the result does not depend on item order.
    """
    return math.fsum(item_total(item.quantity, item.unit_price) for item in items)


def discount_value(
    subtotal_value: float,
    discount: float | None,
    discount_type: DiscountType | None,
) -> float:
    """
    Amount taken off the subtotal.

    PERCENTAGE scales the subtotal; FIXED is taken verbatim. A zero or
    missing discount, or a missing type, yields no discount.
    """
    if not discount or discount_type is None:
        return 0.0
    _require_finite("discount", discount)
    if DiscountType(discount_type) is DiscountType.PERCENTAGE:
        return subtotal_value * discount / 100
    return float(discount)


def final_total(subtotal_value: float, discount_amount: float) -> float:
    """Subtotal minus discount, clamped at zero."""
    return max(0.0, subtotal_value - discount_amount)


def calculate_totals(
    items: Iterable[PricedLine],
    discount: float | None = None,
    discount_type: DiscountType | None = None,
) -> PricingBreakdown:
    """Full pricing of a list of lines with an optional discount."""
    sub = subtotal(items)
    off = discount_value(sub, discount, discount_type)
    return PricingBreakdown(subtotal=sub, discount_value=off, total=final_total(sub, off))
