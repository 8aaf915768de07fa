"""In-memory fake repositories for testing.

These implement the same abstract interface as the REST and JSON
repositories but keep everything in a dict.  No network, no file I/O.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import replace
from datetime import datetime, timedelta
from decimal import Decimal

from stockops.domain.exceptions import (
    EntityNotFoundError,
    StaleStockRecordError,
    StockStoreError,
)
from stockops.domain.model.stock import StockRecord
from stockops.domain.repository.stock_repository import StockRepository

_BASE_TIME = datetime(2024, 1, 1, 8, 0)


def make_record(
    stock_id: int,
    product_id: int,
    quantity: str | int,
    reserved: str | int = 0,
    company_id: int = 1,
    **extra,
) -> StockRecord:
    """Stock row whose creation time follows its id, so id order is FIFO order."""
    return StockRecord(
        stock_id=stock_id,
        company_id=company_id,
        product_id=product_id,
        quantity=Decimal(str(quantity)),
        reserved_quantity=Decimal(str(reserved)),
        created_at=extra.pop("created_at", _BASE_TIME + timedelta(hours=stock_id)),
        **extra,
    )


class FakeStockRepository(StockRepository):
    """Versioned in-memory store.

    ``before_update`` runs ahead of every update and lets a test simulate
    another client writing in between; ``fail_on_update`` makes the n-th
    update call (1-based) raise a store error.
    """

    def __init__(self, records: list[StockRecord] | None = None) -> None:
        self._store: dict[int, StockRecord] = {}
        for r in records or []:
            self._store[r.stock_id] = replace(r)
        self._next_id = max(self._store, default=0) + 1
        self.update_calls = 0
        self.list_calls = 0
        self.before_update: Callable[[StockRecord], None] | None = None
        self.fail_on_update: int | None = None

    def get(self, stock_id: int) -> StockRecord:
        return self._store[stock_id]

    def list_for_company(self, company_id: int | None) -> list[StockRecord]:
        self.list_calls += 1
        return [
            replace(r)
            for r in self._store.values()
            if company_id is None or r.company_id == company_id
        ]

    def get_by_id(self, stock_id: int, company_id: int) -> StockRecord | None:
        r = self._store.get(stock_id)
        if r is None or r.company_id != company_id:
            return None
        return replace(r)

    def create(self, record: StockRecord) -> StockRecord:
        saved = replace(
            record,
            stock_id=self._next_id,
            created_at=record.created_at or _BASE_TIME + timedelta(days=365),
            version=1,
        )
        self._store[saved.stock_id] = saved
        self._next_id += 1
        return replace(saved)

    def update(self, record: StockRecord) -> StockRecord:
        self.update_calls += 1
        if self.before_update is not None:
            self.before_update(record)
        if self.fail_on_update is not None and self.update_calls == self.fail_on_update:
            raise StockStoreError("HTTP 500: Internal Server Error")

        current = self._store.get(record.stock_id)
        if current is None or current.company_id != record.company_id:
            raise EntityNotFoundError(f"Stock record {record.stock_id} not found")
        if current.version != record.version:
            raise StaleStockRecordError(record.stock_id, record.version)
        saved = replace(record, version=record.version + 1)
        self._store[saved.stock_id] = saved
        return replace(saved)

    def delete(self, stock_id: int, company_id: int) -> None:
        if self.get_by_id(stock_id, company_id) is None:
            raise EntityNotFoundError(f"Stock record {stock_id} not found")
        del self._store[stock_id]

    def bump(self, stock_id: int, **changes) -> None:
        """Simulate a write by another client."""
        current = self._store[stock_id]
        self._store[stock_id] = replace(current, version=current.version + 1, **changes)
