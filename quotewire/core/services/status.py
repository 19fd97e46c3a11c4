"""
Quote status rules shared by budgets and material lists.

PENDING moves to APPROVED or REJECTED by an explicit decision and to
EXPIRED once its validity date passes. Editing a decided quote sends it
back to PENDING, since the total behind the decision may change.
"""

import math
from dataclasses import dataclass
from datetime import UTC, datetime

from quotewire.core.entities.common import QuoteStatus
from quotewire.core.services.validation import parse_date

DECIDED_STATUSES = frozenset({QuoteStatus.APPROVED, QuoteStatus.REJECTED})


@dataclass(frozen=True)
class StatusBadge:
    label: str
    color: str


_BADGES = {
    QuoteStatus.PENDING: StatusBadge("Pending", "#F59E0B"),
    QuoteStatus.APPROVED: StatusBadge("Approved", "#10B981"),
    QuoteStatus.REJECTED: StatusBadge("Rejected", "#EF4444"),
    QuoteStatus.EXPIRED: StatusBadge("Expired", "#6B7280"),
}


def format_status(status: QuoteStatus | str | None) -> StatusBadge:
    """Display label and color for a status."""
    try:
        return _BADGES[QuoteStatus(status)]
    except ValueError:
        return StatusBadge(str(status), "#6B7280")


def requires_reopen(status: QuoteStatus | None) -> bool:
    """True when an edit must first move the quote back to PENDING."""
    return status in DECIDED_STATUSES


def status_after_edit(status: QuoteStatus | None) -> QuoteStatus | None:
    """Status a quote ends up in once its items or discount change."""
    return QuoteStatus.PENDING if requires_reopen(status) else status


def can_edit(status: QuoteStatus | None) -> bool:
    """Whether the UI offers editing without a reopen."""
    return status is None or status == QuoteStatus.PENDING


def is_approved(status: QuoteStatus | None) -> bool:
    return status == QuoteStatus.APPROVED


def days_until_expiration(valid_until: str | None, now: datetime | None = None) -> int | None:
    """Whole days left until valid_until (rounded up), negative once past."""
    if not valid_until:
        return None
    parsed = parse_date(valid_until)
    if parsed is None:
        return None
    seconds = (parsed - (now or datetime.now(UTC))).total_seconds()
    return math.ceil(seconds / 86400)


def is_expired(valid_until: str | None, now: datetime | None = None) -> bool:
    if not valid_until:
        return False
    parsed = parse_date(valid_until)
    return parsed is not None and parsed < (now or datetime.now(UTC))


def format_validity_period(valid_until: str | None, now: datetime | None = None) -> str:
    """Human readable validity hint for quote cards."""
    days = days_until_expiration(valid_until, now)
    if days is None:
        return ""
    if days < 0:
        return f"Expired {abs(days)} day(s) ago"
    if days == 0:
        return "Expires today"
    if days == 1:
        return "Expires tomorrow"
    return f"Expires in {days} day(s)"
