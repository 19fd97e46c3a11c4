"""
Validation rules for quotes, catalog records, clients and passwords.

Every rule collects all violations in one pass and returns a
ValidationResult; nothing here raises. Inputs may be entity models or
raw camelCase dicts as typed into a form.
"""

import math
import re
from collections.abc import Mapping
from datetime import UTC, date, datetime
from typing import Any

from quotewire.core.entities.common import QuoteStatus, Unit
from quotewire.core.entities.validation import ValidationResult

_EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

_STATUS_VALUES = [s.value for s in QuoteStatus]
_UNIT_VALUES = [u.value for u in Unit]


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


def _field(data: Any, name: str) -> Any:
    """Read a snake_case field from a model or a camel/snake keyed mapping."""
    if isinstance(data, Mapping):
        camel = _to_camel(name)
        return data[camel] if camel in data else data.get(name)
    return getattr(data, name, None)


def _blank(value: Any) -> bool:
    return value is None or not str(value).strip()


def _check_positive(errors: list[str], label: str, value: Any) -> None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        if not math.isfinite(value):
            errors.append(f"{label} must be a finite number")
            return
        if value > 0:
            return
    errors.append(f"{label} must be greater than zero")


def _check_status(errors: list[str], status: Any) -> None:
    if status is None or status == "":
        return
    value = status.value if isinstance(status, QuoteStatus) else status
    if value not in _STATUS_VALUES:
        errors.append(f"Invalid status. Use: {', '.join(_STATUS_VALUES)}")


def parse_date(value: Any) -> datetime | None:
    """Parse an ISO date/datetime (or date object) into an aware datetime."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        try:
            parsed = datetime.fromisoformat(str(value).strip())
        except ValueError:
            return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def validate_budget(data: Any, now: datetime | None = None) -> ValidationResult:
    """Check a budget before it is created or updated."""
    errors: list[str] = []

    if _blank(_field(data, "name")):
        errors.append("Budget name is required")

    if _blank(_field(data, "client_id")):
        errors.append("Client is required")

    _check_status(errors, _field(data, "status"))

    valid_until = _field(data, "valid_until")
    if valid_until:
        parsed = parse_date(valid_until)
        if parsed is None:
            errors.append("Invalid valid-until date")
        elif parsed < (now or datetime.now(UTC)):
            errors.append("Valid-until date must be in the future")

    return ValidationResult(errors=errors)


def validate_budget_item(data: Any) -> ValidationResult:
    """Check a budget line before it is added or changed."""
    errors: list[str] = []

    if _blank(_field(data, "name")):
        errors.append("Item name is required")

    _check_positive(errors, "Quantity", _field(data, "quantity"))
    _check_positive(errors, "Unit price", _field(data, "unit_price"))

    if _blank(_field(data, "service_id")) and _blank(_field(data, "material_id")):
        errors.append("Item must be linked to a service or material")

    return ValidationResult(errors=errors)


def validate_material_list(data: Any) -> ValidationResult:
    """Check a material list before it is created or updated."""
    errors: list[str] = []

    if _blank(_field(data, "name")):
        errors.append("Material list name is required")

    if _blank(_field(data, "client_id")):
        errors.append("Client is required")

    _check_status(errors, _field(data, "status"))

    return ValidationResult(errors=errors)


def validate_material_list_item(data: Any) -> ValidationResult:
    """Check a material list line before it is added or changed."""
    errors: list[str] = []

    if _blank(_field(data, "name")):
        errors.append("Item name is required")

    if _blank(_field(data, "material_id")):
        errors.append("Material is required")

    _check_positive(errors, "Quantity", _field(data, "quantity"))
    _check_positive(errors, "Unit price", _field(data, "unit_price"))

    return ValidationResult(errors=errors)


def _check_unit(errors: list[str], unit: Any) -> None:
    if _blank(unit):
        errors.append("Unit is required")
        return
    value = unit.value if isinstance(unit, Unit) else unit
    if value not in _UNIT_VALUES:
        errors.append(f"Invalid unit. Use: {' or '.join(_UNIT_VALUES)}")


def validate_material(data: Any) -> ValidationResult:
    """Check a catalog material."""
    errors: list[str] = []
    if _blank(_field(data, "name")):
        errors.append("Material name is required")
    if _blank(_field(data, "category")):
        errors.append("Category is required")
    _check_positive(errors, "Price", _field(data, "price"))
    _check_unit(errors, _field(data, "unit"))
    return ValidationResult(errors=errors)


def validate_service(data: Any) -> ValidationResult:
    """Check a catalog service."""
    errors: list[str] = []
    if _blank(_field(data, "name")):
        errors.append("Service name is required")
    _check_positive(errors, "Price", _field(data, "price"))
    _check_unit(errors, _field(data, "unit"))
    return ValidationResult(errors=errors)


def validate_client(data: Any) -> ValidationResult:
    """Check client registration data (Brazilian address format)."""
    errors: list[str] = []

    def text(name: str) -> str:
        value = _field(data, name)
        return "" if value is None else str(value).strip()

    if len(text("full_name")) < 2:
        errors.append("Full name must have at least 2 characters")

    if len(re.sub(r"\D", "", text("phone"))) < 10:
        errors.append("Phone must have at least 10 digits")

    email = text("email")
    if email and not _EMAIL_PATTERN.fullmatch(email):
        errors.append("Email must be a valid address")

    if len(re.sub(r"\D", "", text("cep"))) < 8:
        errors.append("CEP must have 8 digits")

    if len(text("street")) < 3:
        errors.append("Street must have at least 3 characters")

    if not text("number"):
        errors.append("Number is required")

    if len(text("neighborhood")) < 2:
        errors.append("Neighborhood must have at least 2 characters")

    if len(text("city")) < 2:
        errors.append("City must have at least 2 characters")

    if len(text("state")) != 2:
        errors.append("State must be a 2-letter code")

    return ValidationResult(errors=errors)


def validate_password(password: str | None, confirm_password: str | None) -> ValidationResult:
    """Check a new password and its confirmation."""
    errors: list[str] = []
    if not password:
        errors.append("Password is required")
    elif len(password) < 6:
        errors.append("Password must have at least 6 characters")
    if password and password != confirm_password:
        errors.append("Passwords do not match")
    return ValidationResult(errors=errors)
