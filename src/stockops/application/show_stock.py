"""Application service: Show Stock use cases (queries)."""

from __future__ import annotations

from stockops.application.dto import StockLineDTO, StockSummaryDTO
from stockops.domain.repository.stock_repository import StockRepository
from stockops.domain.service.stock_management_service import StockManagementService


class ShowStockHandler:

    def __init__(self, stock_repo: StockRepository) -> None:
        self._stock_repo = stock_repo

    def handle(self, company_id: int | None) -> list[StockLineDTO]:
        svc = StockManagementService(self._stock_repo)
        return [
            StockLineDTO(
                stock_id=r.stock_id,  # type: ignore[arg-type]
                company_id=r.company_id,
                product_id=r.product_id,
                quantity=str(r.quantity),
                reserved=str(r.reserved_quantity),
                available=str(r.available_quantity),
                location=r.location or "",
            )
            for r in svc.list_stock(company_id)
        ]


class StockSummaryHandler:

    def __init__(self, stock_repo: StockRepository) -> None:
        self._stock_repo = stock_repo

    def handle(self, company_id: int | None) -> StockSummaryDTO:
        summary = StockManagementService(self._stock_repo).summarize_stock(company_id)
        return StockSummaryDTO(
            total_products=summary.total_products,
            total_quantity=str(summary.total_quantity),
            low_stock_products=summary.low_stock_products,
            total_value=str(summary.total_value),
        )
