"""Domain service: multi-company stock management.

Coordinates availability checks, FIFO reservations, delivery reductions,
cancellations and additions over the stock rows of one company.

Every mutating operation follows the same plan-then-commit shape:
  Phase 1: read the company's rows and plan every item against an
           in-memory copy.  Any business failure raises here, before a
           single write.
  Phase 2: write the changed rows.  Writes carry the version that was
           read; if the store reports a conflict or fails half way, the
           rows already written are restored and, for conflicts, the
           whole operation is re-planned from a fresh read.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import replace
from decimal import Decimal

from stockops.domain.exceptions import (
    DomainException,
    StaleStockRecordError,
    StockStoreError,
)
from stockops.domain.model.adjustment import AdjustmentReason, ReferenceType
from stockops.domain.model.results import (
    AvailabilityReport,
    InsufficientItem,
    StockAvailability,
    StockOperationResult,
    StockSummary,
)
from stockops.domain.model.stock import ZERO, StockRecord
from stockops.domain.model.value_objects import OrderItemRequest, Quantity
from stockops.domain.repository.stock_repository import StockRepository
from stockops.domain.service.allocation import (
    PlannedRow,
    StockPlan,
    plan_addition,
    plan_reduction,
    plan_release,
    plan_reservation,
)

logger = logging.getLogger(__name__)

DEFAULT_CONFLICT_RETRIES = 3
LOW_STOCK_THRESHOLD = Decimal("10")


class StockManagementService:

    def __init__(
        self,
        stock_repo: StockRepository,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
    ) -> None:
        self._stock_repo = stock_repo
        self._conflict_retries = conflict_retries

    # --- Queries --------------------------------------------------------------

    def check_availability(
        self, company_id: int, items: list[OrderItemRequest]
    ) -> AvailabilityReport:
        """Report available = total - reserved for every requested product.

        Read-only.  Each item is judged on its own against the current
        rows; store errors propagate to the caller.
        """
        records = self._stock_repo.list_for_company(company_id)

        availability: list[StockAvailability] = []
        insufficient: list[InsufficientItem] = []

        for item in items:
            rows = [
                r for r in records
                if r.company_id == company_id and r.product_id == item.product_id
            ]
            total = sum((r.quantity for r in rows), ZERO)
            reserved = sum((r.reserved_quantity for r in rows), ZERO)
            available = total - reserved

            availability.append(
                StockAvailability(
                    product_id=item.product_id,
                    company_id=company_id,
                    available_quantity=available,
                    reserved_quantity=reserved,
                    total_quantity=total,
                )
            )
            if available < item.quantity:
                insufficient.append(
                    InsufficientItem(
                        product_id=item.product_id,
                        requested=item.quantity,
                        available=available,
                    )
                )

        return AvailabilityReport(
            success=not insufficient,
            availability=availability,
            insufficient_items=insufficient or None,
        )

    def list_stock(self, company_id: int | None) -> list[StockRecord]:
        return sorted(
            self._stock_repo.list_for_company(company_id),
            key=lambda r: (r.company_id, r.product_id, r.fifo_key),
        )

    def summarize_stock(self, company_id: int | None = None) -> StockSummary:
        """Headline figures for the stock screen of one or all companies."""
        records = self._stock_repo.list_for_company(company_id)
        total_quantity = sum((r.quantity for r in records), ZERO)
        total_value = sum(
            (r.quantity * (r.unit_cost or ZERO) for r in records), ZERO
        )
        return StockSummary(
            total_products=len(records),
            total_quantity=total_quantity.quantize(Decimal("0.01")),
            low_stock_products=sum(
                1 for r in records if ZERO < r.quantity < LOW_STOCK_THRESHOLD
            ),
            total_value=total_value.quantize(Decimal("0.01")),
        )

    # --- Mutations ------------------------------------------------------------

    def reserve_stock(
        self, company_id: int, items: list[OrderItemRequest], order_id: int
    ) -> StockOperationResult:
        """Reserve every item for an order, consuming rows oldest first.

        All-or-nothing: if any item cannot be fully reserved nothing is
        written and InsufficientStockError (or EntityNotFoundError when the
        product has no stock row at all) is raised.
        """
        _require_positive(items)

        def build(plan: StockPlan) -> None:
            for item in items:
                plan_reservation(plan, item, order_id)

        return self._execute(company_id, build, "reserve", order_id)

    def confirm_stock_reduction(
        self,
        company_id: int,
        items: list[OrderItemRequest],
        order_id: int,
        reason: AdjustmentReason = AdjustmentReason.ORDER_CREATED,
        reference_type: ReferenceType = ReferenceType.ORDER,
    ) -> StockOperationResult:
        """Remove delivered quantities from stock and clear their reservation."""
        _require_positive(items)

        def build(plan: StockPlan) -> None:
            for item in items:
                plan_reduction(plan, item, order_id, reason, reference_type)

        return self._execute(company_id, build, "confirm_reduction", order_id)

    def cancel_stock_reservation(
        self, company_id: int, items: list[OrderItemRequest], order_id: int
    ) -> StockOperationResult:
        """Release an order's reservations.  Physical quantity is untouched."""
        _require_positive(items)

        def build(plan: StockPlan) -> None:
            for item in items:
                unreleased = plan_release(plan, item, order_id)
                if unreleased > 0:
                    logger.warning(
                        "Cancelled more stock than was reserved",
                        extra={
                            "company_id": company_id,
                            "product_id": item.product_id,
                            "order_id": order_id,
                            "unreleased": str(unreleased),
                        },
                    )

        return self._execute(company_id, build, "cancel_reservation", order_id)

    def add_stock(
        self,
        company_id: int,
        product_id: int,
        quantity: Decimal,
        reason: AdjustmentReason,
        reference_id: int | None = None,
    ) -> StockOperationResult:
        """Add stock to the product's oldest row, creating a row if none exists."""
        Quantity(quantity)

        def build(plan: StockPlan) -> None:
            plan_addition(plan, product_id, quantity, reason, reference_id)

        return self._execute(company_id, build, "add", reference_id)

    def increase_stock(
        self,
        company_id: int,
        items: list[OrderItemRequest],
        reference_id: int | None,
        reason: AdjustmentReason = AdjustmentReason.MANUAL_ADJUSTMENT,
    ) -> StockOperationResult:
        """Bulk addition for a whole return or reception slip."""
        _require_positive(items)

        def build(plan: StockPlan) -> None:
            for item in items:
                plan_addition(plan, item.product_id, item.quantity, reason, reference_id)

        return self._execute(company_id, build, "increase", reference_id)

    # --- Plan execution -------------------------------------------------------

    def _execute(
        self,
        company_id: int,
        build: Callable[[StockPlan], None],
        operation: str,
        reference_id: int | None,
    ) -> StockOperationResult:
        attempt = 0
        while True:
            plan = StockPlan(company_id, self._stock_repo.list_for_company(company_id))
            build(plan)
            applied: list[tuple[PlannedRow, StockRecord]] = []
            try:
                self._commit(plan, applied)
            except StaleStockRecordError:
                attempt += 1
                # A re-plan on top of a half-restored write would apply the
                # operation twice.
                restored = self._compensate(applied)
                if not restored or attempt > self._conflict_retries:
                    logger.error(
                        "Giving up on stock operation after a conflict",
                        extra={
                            "operation": operation,
                            "company_id": company_id,
                            "reference_id": reference_id,
                            "attempts": attempt,
                            "restored": restored,
                        },
                    )
                    raise
                logger.warning(
                    "Stock rows changed concurrently, re-planning",
                    extra={
                        "operation": operation,
                        "company_id": company_id,
                        "reference_id": reference_id,
                        "attempt": attempt,
                    },
                )
                continue
            except (StockStoreError, DomainException):
                self._compensate(applied)
                raise

            adjustments = plan.adjustments
            logger.info(
                "Stock operation committed",
                extra={
                    "operation": operation,
                    "company_id": company_id,
                    "reference_id": reference_id,
                    "rows_written": len(plan.changes),
                },
            )
            return StockOperationResult(adjustments=adjustments)

    def _commit(
        self, plan: StockPlan, applied: list[tuple[PlannedRow, StockRecord]]
    ) -> None:
        """Write every changed row, recording each successful write in ``applied``."""
        for row in plan.changes:
            if row.original is None:
                saved = self._stock_repo.create(row.working)
                row.working.stock_id = saved.stock_id
            else:
                saved = self._stock_repo.update(row.working)
            applied.append((row, saved))

    def _compensate(self, applied: list[tuple[PlannedRow, StockRecord]]) -> bool:
        """Write the pre-operation quantities back onto rows already changed.

        Returns False when at least one row could not be restored.
        """
        restored = True
        for row, saved in reversed(applied):
            if row.original is None:
                restore = replace(saved, quantity=ZERO, reserved_quantity=ZERO)
            else:
                restore = replace(
                    saved,
                    quantity=row.original.quantity,
                    reserved_quantity=row.original.reserved_quantity,
                )
            try:
                self._stock_repo.update(restore)
            except (StockStoreError, DomainException):
                restored = False
                logger.exception(
                    "Could not restore stock row after a failed operation",
                    extra={
                        "stock_id": saved.stock_id,
                        "company_id": saved.company_id,
                        "quantity": str(restore.quantity),
                        "reserved_quantity": str(restore.reserved_quantity),
                    },
                )
        return restored


def _require_positive(items: list[OrderItemRequest]) -> None:
    for item in items:
        Quantity(item.quantity)
