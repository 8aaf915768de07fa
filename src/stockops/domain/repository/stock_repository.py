"""Abstract repository for StockRecord aggregate.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete implementations (REST API, JSON file)
live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from stockops.domain.model.stock import StockRecord


class StockRepository(ABC):

    @abstractmethod
    def list_for_company(self, company_id: int | None) -> list[StockRecord]:
        """Return every live stock row of a company (all companies if None)."""

    @abstractmethod
    def get_by_id(self, stock_id: int, company_id: int) -> StockRecord | None:
        """Return one stock row, or None if it does not exist."""

    @abstractmethod
    def create(self, record: StockRecord) -> StockRecord:
        """Persist a new stock row and return it with its assigned id."""

    @abstractmethod
    def update(self, record: StockRecord) -> StockRecord:
        """Persist new quantities for an existing row.

        ``record.version`` is the version the caller read.  Raises
        StaleStockRecordError if the stored row has moved on since.
        Returns the stored row carrying its new version.
        """

    @abstractmethod
    def delete(self, stock_id: int, company_id: int) -> None:
        """Soft-delete a stock row."""
