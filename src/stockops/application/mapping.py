"""Conversions shared by the stock use cases."""

from __future__ import annotations

from stockops.application.dto import AdjustmentDTO, StockItemSpec
from stockops.domain.model.adjustment import StockAdjustment
from stockops.domain.model.value_objects import OrderItemRequest


def to_requests(specs: list[StockItemSpec]) -> list[OrderItemRequest]:
    """Validate operator input into domain item requests."""
    return [OrderItemRequest.of(spec.product_id, spec.quantity) for spec in specs]


def to_adjustment_dtos(adjustments: list[StockAdjustment]) -> list[AdjustmentDTO]:
    return [
        AdjustmentDTO(
            stock_id=adj.stock_id,
            product_id=adj.product_id,
            quantity_change=f"{adj.quantity_change:+}",
            reason=adj.reason.value,
            reference=_reference(adj),
        )
        for adj in adjustments
    ]


def _reference(adj: StockAdjustment) -> str:
    if adj.reference_id is None:
        return "-"
    kind = adj.reference_type.value if adj.reference_type else "ref"
    return f"{kind} #{adj.reference_id}"
