"""FIFO allocation of stock movements across a product's stock rows.

Every function here works on a StockPlan: an in-memory copy of the rows
read from the store.  Planning mutates only those copies, so a request
that cannot be served raises before anything is written, and later items
of the same request see the allocations of earlier ones.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal

from stockops.domain.exceptions import EntityNotFoundError, InsufficientStockError
from stockops.domain.model.adjustment import (
    AdjustmentReason,
    ReferenceType,
    StockAdjustment,
)
from stockops.domain.model.stock import ZERO, StockRecord
from stockops.domain.model.value_objects import OrderItemRequest


@dataclass
class PlannedRow:
    original: StockRecord | None  # None for rows the plan creates
    working: StockRecord
    changed: bool = False


@dataclass
class _PendingAdjustment:
    record: StockRecord
    quantity_change: Decimal
    reason: AdjustmentReason
    reference_id: int | None
    reference_type: ReferenceType | None


class StockPlan:
    """Working copy of one company's stock rows plus the movements planned on them."""

    def __init__(self, company_id: int, records: list[StockRecord]) -> None:
        self.company_id = company_id
        self._rows = [
            PlannedRow(original=record, working=replace(record))
            for record in sorted(records, key=lambda r: r.fifo_key)
            if record.company_id == company_id
        ]
        self._pending: list[_PendingAdjustment] = []

    def rows_for(self, product_id: int) -> list[StockRecord]:
        """Working rows of a product, oldest first."""
        return [row.working for row in self._rows if row.working.product_id == product_id]

    def add_row(self, record: StockRecord) -> None:
        self._rows.append(PlannedRow(original=None, working=record, changed=True))

    def record_movement(
        self,
        record: StockRecord,
        quantity_change: Decimal,
        reason: AdjustmentReason,
        reference_id: int | None,
        reference_type: ReferenceType | None,
    ) -> None:
        for row in self._rows:
            if row.working is record:
                row.changed = True
                break
        else:
            raise ValueError(f"Stock row {record.stock_id} is not part of this plan")
        self._pending.append(
            _PendingAdjustment(record, quantity_change, reason, reference_id, reference_type)
        )

    @property
    def changes(self) -> list[PlannedRow]:
        return [row for row in self._rows if row.changed]

    @property
    def adjustments(self) -> list[StockAdjustment]:
        # Built on access so rows created at commit time carry their new id.
        return [
            StockAdjustment(
                product_id=p.record.product_id,
                company_id=self.company_id,
                quantity_change=p.quantity_change,
                reason=p.reason,
                reference_id=p.reference_id,
                reference_type=p.reference_type,
                stock_id=p.record.stock_id,
            )
            for p in self._pending
        ]


def plan_reservation(plan: StockPlan, item: OrderItemRequest, order_id: int) -> None:
    """Reserve ``item.quantity`` across the product's rows, oldest row first.

    Raises EntityNotFoundError when the company holds no row for the
    product, InsufficientStockError when the rows together cannot cover it.
    """
    rows = plan.rows_for(item.product_id)
    if not rows:
        raise EntityNotFoundError(f"No stock found for product {item.product_id}")

    remaining = item.quantity
    for record in rows:
        if remaining <= 0:
            break
        to_reserve = min(record.available_quantity, remaining)
        if to_reserve > 0:
            record.reserve(to_reserve)
            plan.record_movement(
                record,
                -to_reserve,
                AdjustmentReason.ORDER_CREATED,
                order_id,
                ReferenceType.ORDER,
            )
            remaining -= to_reserve

    if remaining > 0:
        raise InsufficientStockError(
            item.product_id, requested=item.quantity, available=item.quantity - remaining
        )


def plan_reduction(
    plan: StockPlan,
    item: OrderItemRequest,
    reference_id: int,
    reason: AdjustmentReason = AdjustmentReason.ORDER_CREATED,
    reference_type: ReferenceType = ReferenceType.ORDER,
) -> None:
    """Physically remove delivered stock, clearing the matching reservation.

    The product's rows must hold at least ``item.quantity`` on hand.
    """
    rows = plan.rows_for(item.product_id)
    on_hand = sum((r.quantity for r in rows), ZERO)
    if on_hand < item.quantity:
        raise InsufficientStockError(item.product_id, requested=item.quantity, available=on_hand)

    remaining = item.quantity
    for record in rows:
        if remaining <= 0:
            break
        reserved_to_clear = min(record.reserved_quantity, remaining)
        to_reduce = min(record.quantity, remaining)
        if to_reduce > 0:
            record.reduce(to_reduce, reserved_to_clear)
            plan.record_movement(record, -to_reduce, reason, reference_id, reference_type)
            remaining -= to_reduce


def plan_release(plan: StockPlan, item: OrderItemRequest, order_id: int) -> Decimal:
    """Release reservations for a cancelled order.

    Returns the part of ``item.quantity`` that was not reserved anywhere
    (zero when everything was released).
    """
    remaining = item.quantity
    for record in plan.rows_for(item.product_id):
        if remaining <= 0:
            break
        to_release = min(record.reserved_quantity, remaining)
        if to_release > 0:
            record.release(to_release)
            plan.record_movement(
                record,
                to_release,
                AdjustmentReason.ORDER_CANCELLED,
                order_id,
                ReferenceType.ORDER,
            )
            remaining -= to_release
    return max(remaining, ZERO)


def plan_addition(
    plan: StockPlan,
    product_id: int,
    quantity: Decimal,
    reason: AdjustmentReason,
    reference_id: int | None,
    reference_type: ReferenceType | None = None,
) -> None:
    """Add stock to the oldest row of the product, or open a new row."""
    if reference_type is None:
        reference_type = ReferenceType.for_reason(reason)

    rows = plan.rows_for(product_id)
    if rows:
        target = rows[0]
        target.add(quantity)
    else:
        target = StockRecord(
            stock_id=None,
            company_id=plan.company_id,
            product_id=product_id,
            quantity=ZERO,
        )
        target.add(quantity)
        plan.add_row(target)
    plan.record_movement(target, quantity, reason, reference_id, reference_type)
