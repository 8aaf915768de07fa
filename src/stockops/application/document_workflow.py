"""Application service: stock hooks for the business-document workflows.

Orders, issue slips, return slips and reception slips each move stock at
a given point of their life.  These hooks are what the document screens
call; they never raise for business or store failures and report a
WorkflowOutcome the screen can show as-is.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field

from stockops.domain.exceptions import DomainException, StockStoreError
from stockops.domain.model.adjustment import AdjustmentReason, ReferenceType, StockAdjustment
from stockops.domain.model.results import StockOperationResult
from stockops.domain.model.value_objects import OrderItemRequest
from stockops.domain.repository.stock_repository import StockRepository
from stockops.domain.service.stock_management_service import (
    DEFAULT_CONFLICT_RETRIES,
    StockManagementService,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WorkflowOutcome:
    success: bool
    message: str
    warnings: list[str] = field(default_factory=list)
    adjustments: list[StockAdjustment] = field(default_factory=list)


class DocumentStockWorkflow:

    def __init__(
        self,
        stock_repo: StockRepository,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
    ) -> None:
        self._svc = StockManagementService(stock_repo, conflict_retries)

    # --- Orders ---------------------------------------------------------------

    def validate_order_stock(
        self, company_id: int, items: list[OrderItemRequest]
    ) -> WorkflowOutcome:
        """Run before an order is saved; lists every short product."""
        try:
            report = self._svc.check_availability(company_id, items)
        except (DomainException, StockStoreError):
            logger.exception("Error validating order stock", extra={"company_id": company_id})
            return WorkflowOutcome(
                False, "Could not check stock", ["Error checking stock availability"]
            )

        if report.success:
            return WorkflowOutcome(True, "Stock available")
        warnings = [
            f"Product {i.product_id}: Requested {i.requested}, Available {i.available}"
            for i in report.insufficient_items or []
        ]
        return WorkflowOutcome(False, "Insufficient stock", warnings)

    def process_order_creation(
        self, company_id: int, items: list[OrderItemRequest], order_id: int
    ) -> WorkflowOutcome:
        return self._run(
            "Stock reserved for order",
            "Error reserving stock",
            lambda: self._svc.reserve_stock(company_id, items, order_id),
            company_id,
            order_id,
        )

    def process_order_shipment(
        self, company_id: int, items: list[OrderItemRequest], order_id: int
    ) -> WorkflowOutcome:
        """Run when an order is shipped or delivered."""
        return self._run(
            "Stock automatically reduced for shipped order",
            "Error reducing stock",
            lambda: self._svc.confirm_stock_reduction(company_id, items, order_id),
            company_id,
            order_id,
        )

    process_delivered_order = process_order_shipment

    def process_order_cancellation(
        self, company_id: int, items: list[OrderItemRequest], order_id: int
    ) -> WorkflowOutcome:
        return self._run(
            "Stock reservation released",
            "Error releasing stock",
            lambda: self._svc.cancel_stock_reservation(company_id, items, order_id),
            company_id,
            order_id,
        )

    def process_order_return(
        self, company_id: int, items: list[OrderItemRequest], order_id: int | None = None
    ) -> WorkflowOutcome:
        """Put returned goods back into stock."""
        return self._run(
            "Stock automatically added back from return",
            "Error adding returned stock",
            lambda: self._svc.increase_stock(
                company_id, items, order_id, AdjustmentReason.RETURN
            ),
            company_id,
            order_id,
        )

    # --- Slips ----------------------------------------------------------------

    def process_issue_slip_delivery(
        self, company_id: int, items: list[OrderItemRequest], issue_slip_id: int
    ) -> WorkflowOutcome:
        return self._run(
            "Stock automatically reduced for issued items",
            "Error reducing stock",
            lambda: self._svc.confirm_stock_reduction(
                company_id,
                items,
                issue_slip_id,
                reference_type=ReferenceType.ISSUE_SLIP,
            ),
            company_id,
            issue_slip_id,
        )

    def process_return_slip_confirmation(
        self, company_id: int, items: list[OrderItemRequest], return_slip_id: int
    ) -> WorkflowOutcome:
        return self._run(
            "Stock automatically increased from returned items",
            "Error increasing stock",
            lambda: self._svc.increase_stock(
                company_id, items, return_slip_id, AdjustmentReason.RETURN_RECEIVED
            ),
            company_id,
            return_slip_id,
        )

    def process_reception_slip_confirmation(
        self, company_id: int, items: list[OrderItemRequest], reception_slip_id: int
    ) -> WorkflowOutcome:
        return self._run(
            "Stock automatically increased from received items",
            "Error increasing stock",
            lambda: self._svc.increase_stock(
                company_id, items, reception_slip_id, AdjustmentReason.RECEPTION_CONFIRMED
            ),
            company_id,
            reception_slip_id,
        )

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _run(
        ok_message: str,
        error_message: str,
        action: Callable[[], StockOperationResult],
        company_id: int,
        reference_id: int | None,
    ) -> WorkflowOutcome:
        try:
            result = action()
        except (DomainException, StockStoreError) as exc:
            logger.warning(
                error_message,
                extra={"company_id": company_id, "reference_id": reference_id, "error": str(exc)},
            )
            return WorkflowOutcome(False, f"{error_message}: {exc}")
        return WorkflowOutcome(True, ok_message, adjustments=result.adjustments)
