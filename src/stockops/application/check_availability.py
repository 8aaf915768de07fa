"""Application service: Check Availability use case (query)."""

from __future__ import annotations

from stockops.application.dto import AvailabilityDTO, AvailabilityLineDTO, StockItemSpec
from stockops.application.mapping import to_requests
from stockops.domain.repository.stock_repository import StockRepository
from stockops.domain.service.stock_management_service import StockManagementService


class CheckAvailabilityHandler:

    def __init__(self, stock_repo: StockRepository) -> None:
        self._stock_repo = stock_repo

    def handle(self, company_id: int, item_specs: list[StockItemSpec]) -> AvailabilityDTO:
        """Tell whether the company can serve every requested item right now."""
        items = to_requests(item_specs)

        svc = StockManagementService(self._stock_repo)
        report = svc.check_availability(company_id, items)

        return AvailabilityDTO(
            success=report.success,
            lines=[
                AvailabilityLineDTO(
                    product_id=line.product_id,
                    requested=str(item.quantity),
                    total=str(line.total_quantity),
                    reserved=str(line.reserved_quantity),
                    available=str(line.available_quantity),
                    sufficient=line.available_quantity >= item.quantity,
                )
                for item, line in zip(items, report.availability)
            ],
        )
