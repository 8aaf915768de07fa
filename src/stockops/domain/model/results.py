"""Typed results returned by the stock operations."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from stockops.domain.model.adjustment import StockAdjustment


@dataclass(frozen=True)
class StockAvailability:
    product_id: int
    company_id: int
    available_quantity: Decimal
    reserved_quantity: Decimal
    total_quantity: Decimal


@dataclass(frozen=True)
class InsufficientItem:
    product_id: int
    requested: Decimal
    available: Decimal


@dataclass(frozen=True)
class AvailabilityReport:
    """Outcome of an availability check.

    ``insufficient_items`` is ``None`` when every item can be served.
    """

    success: bool
    availability: list[StockAvailability]
    insufficient_items: list[InsufficientItem] | None = None


@dataclass(frozen=True)
class StockOperationResult:
    adjustments: list[StockAdjustment] = field(default_factory=list)
    success: bool = True


@dataclass(frozen=True)
class StockSummary:
    total_products: int
    total_quantity: Decimal
    low_stock_products: int
    total_value: Decimal
