"""
Shared building blocks for wire entities.

The backend speaks camelCase JSON; entities expose snake_case attributes
and serialize back with the original aliases.
"""

import json
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class QuoteStatus(str, Enum):
    """Lifecycle status shared by budgets and material lists."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    EXPIRED = "EXPIRED"


class DiscountType(str, Enum):
    """How a discount amount is applied to a subtotal."""

    PERCENTAGE = "PERCENTAGE"
    FIXED = "FIXED"


class Unit(str, Enum):
    """Catalog unit of measure."""

    UNIT = "UNIT"
    METER = "METER"


class WireModel(BaseModel):
    """Base model for payloads exchanged with the backend."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    def to_wire(self, *, exclude: set[str] | None = None) -> dict[str, Any]:
        """Dump as camelCase JSON-compatible dict, dropping unset values."""
        return self.model_dump(
            mode="json",
            by_alias=True,
            exclude_none=True,
            exclude=exclude,
        )


class QueryFilters(WireModel):
    """Flat AND-combined equality/contains filters for list endpoints."""

    def to_params(self) -> dict[str, str]:
        """Query-string parameters, skipping empty values."""
        return {k: str(v) for k, v in self.to_wire().items() if v != ""}

    def cache_fragment(self) -> str:
        """Deterministic serialization used inside cache keys."""
        return json.dumps(self.to_params(), sort_keys=True, separators=(",", ":"))
