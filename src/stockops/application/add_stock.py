"""Application service: Add Stock use cases (single product and bulk)."""

from __future__ import annotations

from stockops.application.dto import AdjustmentDTO, StockItemSpec
from stockops.application.mapping import to_adjustment_dtos, to_requests
from stockops.domain.exceptions import ValidationError
from stockops.domain.model.adjustment import AdjustmentReason
from stockops.domain.model.value_objects import Quantity
from stockops.domain.repository.stock_repository import StockRepository
from stockops.domain.service.stock_management_service import (
    DEFAULT_CONFLICT_RETRIES,
    StockManagementService,
)


def parse_reason(raw: str) -> AdjustmentReason:
    try:
        return AdjustmentReason(raw)
    except ValueError:
        allowed = ", ".join(r.value for r in AdjustmentReason)
        raise ValidationError(f"Unknown reason '{raw}'. Expected one of: {allowed}")


class AddStockHandler:

    def __init__(
        self,
        stock_repo: StockRepository,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
    ) -> None:
        self._stock_repo = stock_repo
        self._conflict_retries = conflict_retries

    def handle(
        self,
        company_id: int,
        product_id: int,
        quantity: str,
        reason: str,
        reference_id: int | None = None,
    ) -> list[AdjustmentDTO]:
        """Add stock for one product (return, replenishment, manual fix)."""
        svc = StockManagementService(self._stock_repo, self._conflict_retries)
        result = svc.add_stock(
            company_id,
            product_id,
            Quantity.of(quantity).value,
            parse_reason(reason),
            reference_id,
        )
        return to_adjustment_dtos(result.adjustments)


class IncreaseStockHandler:

    def __init__(
        self,
        stock_repo: StockRepository,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
    ) -> None:
        self._stock_repo = stock_repo
        self._conflict_retries = conflict_retries

    def handle(
        self,
        company_id: int,
        item_specs: list[StockItemSpec],
        reference_id: int,
        reason: str = AdjustmentReason.MANUAL_ADJUSTMENT.value,
    ) -> list[AdjustmentDTO]:
        """Add every line of a return or reception slip in one operation."""
        items = to_requests(item_specs)
        svc = StockManagementService(self._stock_repo, self._conflict_retries)
        result = svc.increase_stock(company_id, items, reference_id, parse_reason(reason))
        return to_adjustment_dtos(result.adjustments)
