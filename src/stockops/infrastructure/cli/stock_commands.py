"""CLI commands for company stock."""

from __future__ import annotations

import click

from stockops.application.add_stock import AddStockHandler, IncreaseStockHandler
from stockops.application.cancel_stock_reservation import CancelStockReservationHandler
from stockops.application.check_availability import CheckAvailabilityHandler
from stockops.application.confirm_stock_reduction import ConfirmStockReductionHandler
from stockops.application.dto import AdjustmentDTO, StockItemSpec
from stockops.application.reserve_stock import ReserveStockHandler
from stockops.application.show_stock import ShowStockHandler, StockSummaryHandler
from stockops.domain.exceptions import DomainException, StockStoreError
from stockops.domain.model.adjustment import AdjustmentReason
from stockops.infrastructure.bootstrap import conflict_retries, stock_repository

_REASONS = [r.value for r in AdjustmentReason]


def _parse_items(raw: str) -> list[StockItemSpec]:
    """Parse '12:3,15:2.5' into StockItemSpec list."""
    specs: list[StockItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        product_str, qty_str = pair.rsplit(":", 1)
        try:
            product_id = int(product_str)
        except ValueError:
            raise click.BadParameter(f"Invalid product id '{product_str}'.")
        specs.append(StockItemSpec(product_id=product_id, quantity=qty_str.strip()))
    return specs


def _display_adjustments(adjustments: list[AdjustmentDTO]) -> None:
    click.echo(f"  {'Stock':>6} {'Product':>8} {'Change':>10}  {'Reason':<20} {'Reference':<16}")
    click.echo(f"  {'-'*64}")
    for adj in adjustments:
        stock = adj.stock_id if adj.stock_id is not None else "-"
        click.echo(
            f"  {stock:>6} {adj.product_id:>8} {adj.quantity_change:>10}  "
            f"{adj.reason:<20} {adj.reference:<16}"
        )


@click.command("check")
@click.option("--company", "company_id", required=True, type=int, help="Company ID.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
def stock_check(company_id: int, items: str) -> None:
    """Check whether a company can serve the given items."""
    specs = _parse_items(items)
    handler = CheckAvailabilityHandler(stock_repo=stock_repository())

    try:
        dto = handler.handle(company_id, specs)
    except (DomainException, StockStoreError) as exc:
        raise click.ClickException(str(exc))

    click.echo(f"{'Product':>8} {'Requested':>10} {'Total':>10} {'Reserved':>10} {'Available':>10}")
    click.echo("-" * 52)
    for line in dto.lines:
        marker = "" if line.sufficient else "  << insufficient"
        click.echo(
            f"{line.product_id:>8} {line.requested:>10} {line.total:>10} "
            f"{line.reserved:>10} {line.available:>10}{marker}"
        )

    if not dto.success:
        raise click.ClickException("Insufficient stock for at least one item")
    click.echo("All items available.")


@click.command("reserve")
@click.option("--company", "company_id", required=True, type=int, help="Company ID.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option("--order", "order_id", required=True, type=int, help="Order ID.")
def stock_reserve(company_id: int, items: str, order_id: int) -> None:
    """Reserve stock for an order."""
    specs = _parse_items(items)
    handler = ReserveStockHandler(stock_repository(), conflict_retries())

    try:
        adjustments = handler.handle(company_id, specs, order_id)
    except (DomainException, StockStoreError) as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock reserved for order #{order_id}.")
    _display_adjustments(adjustments)


@click.command("confirm")
@click.option("--company", "company_id", required=True, type=int, help="Company ID.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option("--order", "order_id", required=True, type=int, help="Order ID.")
def stock_confirm(company_id: int, items: str, order_id: int) -> None:
    """Confirm delivery of an order (removes reserved stock)."""
    specs = _parse_items(items)
    handler = ConfirmStockReductionHandler(stock_repository(), conflict_retries())

    try:
        adjustments = handler.handle(company_id, specs, order_id)
    except (DomainException, StockStoreError) as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock reduced for delivered order #{order_id}.")
    _display_adjustments(adjustments)


@click.command("cancel")
@click.option("--company", "company_id", required=True, type=int, help="Company ID.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option("--order", "order_id", required=True, type=int, help="Order ID.")
def stock_cancel(company_id: int, items: str, order_id: int) -> None:
    """Release the stock reserved by a cancelled order."""
    specs = _parse_items(items)
    handler = CancelStockReservationHandler(stock_repository(), conflict_retries())

    try:
        adjustments = handler.handle(company_id, specs, order_id)
    except (DomainException, StockStoreError) as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Reservation released for order #{order_id}.")
    _display_adjustments(adjustments)


@click.command("add")
@click.option("--company", "company_id", required=True, type=int, help="Company ID.")
@click.option("--product", "product_id", required=True, type=int, help="Product ID.")
@click.option("--quantity", required=True, help="Quantity to add (e.g. 12.5).")
@click.option("--reason", type=click.Choice(_REASONS), default="manual_adjustment", show_default=True)
@click.option("--reference", "reference_id", type=int, default=None, help="Source document ID.")
def stock_add(
    company_id: int, product_id: int, quantity: str, reason: str, reference_id: int | None
) -> None:
    """Add stock for one product (returns, replenishment)."""
    handler = AddStockHandler(stock_repository(), conflict_retries())

    try:
        adjustments = handler.handle(company_id, product_id, quantity, reason, reference_id)
    except (DomainException, StockStoreError) as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Added {quantity} of product {product_id} to company {company_id}.")
    _display_adjustments(adjustments)


@click.command("increase")
@click.option("--company", "company_id", required=True, type=int, help="Company ID.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option("--reference", "reference_id", required=True, type=int, help="Slip ID.")
@click.option("--reason", type=click.Choice(_REASONS), default="manual_adjustment", show_default=True)
def stock_increase(company_id: int, items: str, reference_id: int, reason: str) -> None:
    """Add every line of a return or reception slip."""
    specs = _parse_items(items)
    handler = IncreaseStockHandler(stock_repository(), conflict_retries())

    try:
        adjustments = handler.handle(company_id, specs, reference_id, reason)
    except (DomainException, StockStoreError) as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock increased from slip #{reference_id}.")
    _display_adjustments(adjustments)


@click.command("list")
@click.option("--company", "company_id", type=int, default=None, help="Company ID (all if omitted).")
def stock_list(company_id: int | None) -> None:
    """List stock rows."""
    handler = ShowStockHandler(stock_repo=stock_repository())

    try:
        lines = handler.handle(company_id)
    except StockStoreError as exc:
        raise click.ClickException(str(exc))

    if not lines:
        click.echo("No stock records found.")
        return

    click.echo(
        f"{'Stock':>6} {'Company':>8} {'Product':>8} {'Quantity':>10} "
        f"{'Reserved':>10} {'Available':>10}  {'Location':<12}"
    )
    click.echo("-" * 72)
    for line in lines:
        click.echo(
            f"{line.stock_id:>6} {line.company_id:>8} {line.product_id:>8} "
            f"{line.quantity:>10} {line.reserved:>10} {line.available:>10}  {line.location:<12}"
        )


@click.command("summary")
@click.option("--company", "company_id", type=int, default=None, help="Company ID (all if omitted).")
def stock_summary(company_id: int | None) -> None:
    """Show stock totals."""
    handler = StockSummaryHandler(stock_repo=stock_repository())

    try:
        dto = handler.handle(company_id)
    except StockStoreError as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock rows:        {dto.total_products}")
    click.echo(f"Total quantity:    {dto.total_quantity}")
    click.echo(f"Low-stock rows:    {dto.low_stock_products}")
    click.echo(f"Total value:       {dto.total_value}")
