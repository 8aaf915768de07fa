"""StockAdjustment — the audit trail of every stock movement.

Adjustments are not persisted by the core.  Each mutating operation
returns the list it produced so the calling workflow can log or store it.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum


class AdjustmentReason(Enum):
    ORDER_CREATED = "order_created"
    ORDER_CANCELLED = "order_cancelled"
    ORDER_MODIFIED = "order_modified"
    MANUAL_ADJUSTMENT = "manual_adjustment"
    RETURN = "return"
    RETURN_RECEIVED = "return_received"
    RECEPTION_CONFIRMED = "reception_confirmed"


class ReferenceType(Enum):
    ORDER = "order"
    RETURN = "return"
    MANUAL = "manual"
    ISSUE_SLIP = "issue_slip"
    RECEPTION = "reception"

    @staticmethod
    def for_reason(reason: AdjustmentReason) -> ReferenceType:
        """Default document type for a movement reason."""
        return _REFERENCE_BY_REASON[reason]


_REFERENCE_BY_REASON = {
    AdjustmentReason.ORDER_CREATED: ReferenceType.ORDER,
    AdjustmentReason.ORDER_CANCELLED: ReferenceType.ORDER,
    AdjustmentReason.ORDER_MODIFIED: ReferenceType.ORDER,
    AdjustmentReason.MANUAL_ADJUSTMENT: ReferenceType.MANUAL,
    AdjustmentReason.RETURN: ReferenceType.RETURN,
    AdjustmentReason.RETURN_RECEIVED: ReferenceType.RETURN,
    AdjustmentReason.RECEPTION_CONFIRMED: ReferenceType.RECEPTION,
}


@dataclass(frozen=True)
class StockAdjustment:
    """One signed movement on one stock row.

    A negative ``quantity_change`` means available (or physical) stock went
    down; a positive one means it went up.
    """

    product_id: int
    company_id: int
    quantity_change: Decimal
    reason: AdjustmentReason
    reference_id: int | None = None
    reference_type: ReferenceType | None = None
    stock_id: int | None = None
