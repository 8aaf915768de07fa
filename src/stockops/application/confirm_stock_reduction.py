"""Application service: Confirm Stock Reduction use case.

Called when an order is delivered: the reserved quantities physically
leave the stock rows.
"""

from __future__ import annotations

from stockops.application.dto import AdjustmentDTO, StockItemSpec
from stockops.application.mapping import to_adjustment_dtos, to_requests
from stockops.domain.repository.stock_repository import StockRepository
from stockops.domain.service.stock_management_service import (
    DEFAULT_CONFLICT_RETRIES,
    StockManagementService,
)


class ConfirmStockReductionHandler:

    def __init__(
        self,
        stock_repo: StockRepository,
        conflict_retries: int = DEFAULT_CONFLICT_RETRIES,
    ) -> None:
        self._stock_repo = stock_repo
        self._conflict_retries = conflict_retries

    def handle(
        self, company_id: int, item_specs: list[StockItemSpec], order_id: int
    ) -> list[AdjustmentDTO]:
        items = to_requests(item_specs)
        svc = StockManagementService(self._stock_repo, self._conflict_retries)
        result = svc.confirm_stock_reduction(company_id, items, order_id)
        return to_adjustment_dtos(result.adjustments)
