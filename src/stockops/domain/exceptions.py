"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.

Failures of the stock record store (network, server errors, concurrent
writes) are *not* domain errors and derive from StockStoreError instead.
"""

from __future__ import annotations

from decimal import Decimal


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(ValidationError):
    """The requested quantity exceeds what the stock rows can provide."""

    def __init__(self, product_id: int, requested: Decimal, available: Decimal) -> None:
        self.product_id = product_id
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for product {product_id}. "
            f"Missing: {self.missing} (requested {requested}, available {available})"
        )

    @property
    def missing(self) -> Decimal:
        return self.requested - self.available


class StockStoreError(Exception):
    """The stock record store could not be read or written."""


class StaleStockRecordError(StockStoreError):
    """A stock row changed between read and write (optimistic lock failure)."""

    def __init__(self, stock_id: int | None, expected_version: int) -> None:
        self.stock_id = stock_id
        self.expected_version = expected_version
        super().__init__(
            f"Stock record {stock_id} was modified concurrently "
            f"(expected version {expected_version})"
        )
