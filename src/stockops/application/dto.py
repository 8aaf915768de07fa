"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StockItemSpec:
    """Input: a product id and a quantity as typed by the operator."""

    product_id: int
    quantity: str


@dataclass(frozen=True)
class AvailabilityLineDTO:
    product_id: int
    requested: str
    total: str
    reserved: str
    available: str
    sufficient: bool


@dataclass(frozen=True)
class AvailabilityDTO:
    success: bool
    lines: list[AvailabilityLineDTO]


@dataclass(frozen=True)
class AdjustmentDTO:
    """Output: one stock movement as displayed to the user."""

    stock_id: int | None
    product_id: int
    quantity_change: str  # signed, e.g. "-5"
    reason: str
    reference: str  # e.g. "order #12"


@dataclass(frozen=True)
class StockLineDTO:
    stock_id: int
    company_id: int
    product_id: int
    quantity: str
    reserved: str
    available: str
    location: str


@dataclass(frozen=True)
class StockSummaryDTO:
    total_products: int
    total_quantity: str
    low_stock_products: int
    total_value: str
