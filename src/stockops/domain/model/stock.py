"""StockRecord aggregate — on-hand and reserved quantity of one stock row.

A company can hold several rows for the same product when the variant
attributes differ (state, dimensions, location, supplier...).
The core only moves ``quantity`` and ``reserved_quantity``; it opens a
new row only when stock arrives for a product the company lacks.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal

from stockops.domain.exceptions import ValidationError

ZERO = Decimal("0")
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


@dataclass
class StockRecord:
    """Aggregate root for one stock row.

    Invariants:
    - ``0 <= reserved_quantity <= quantity``
    - ``available_quantity`` is always >= 0

    ``version`` is owned by the store and bumped on every write; it is
    sent back with each update so concurrent writers cannot clobber
    each other.
    """

    stock_id: int | None
    company_id: int
    product_id: int
    quantity: Decimal
    reserved_quantity: Decimal = ZERO
    unit_cost: Decimal | None = None
    selling_price: Decimal | None = None
    state: str | None = None
    splicer: str | None = None
    width: Decimal | None = None
    length: Decimal | None = None
    location: str | None = None
    supplier: str | None = None
    created_at: datetime | None = None
    version: int = 0

    @property
    def available_quantity(self) -> Decimal:
        return self.quantity - self.reserved_quantity

    @property
    def fifo_key(self) -> tuple:
        """Sort key for FIFO consumption: oldest row first, then lowest id.

        Rows without a creation timestamp sort before dated ones.  Naive
        timestamps are taken as UTC.
        """
        created_at = self.created_at
        if created_at is not None and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return (
            created_at is not None,
            created_at or _OLDEST,
            self.stock_id or 0,
        )

    # --- Mutations ------------------------------------------------------------

    def reserve(self, quantity: Decimal) -> None:
        """Earmark ``quantity`` of this row for an unfulfilled order."""
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.available_quantity:
            raise ValidationError(
                f"Cannot reserve {quantity} from stock row {self.stock_id} "
                f"(only {self.available_quantity} available)"
            )
        self.reserved_quantity += quantity

    def release(self, quantity: Decimal) -> None:
        """Return previously reserved quantity to the available pool."""
        if quantity <= 0:
            raise ValidationError("Release quantity must be positive")
        if quantity > self.reserved_quantity:
            raise ValidationError(
                f"Cannot release {quantity} from stock row {self.stock_id} "
                f"(only {self.reserved_quantity} currently reserved)"
            )
        self.reserved_quantity -= quantity

    def reduce(self, quantity: Decimal, reserved_to_clear: Decimal) -> None:
        """Remove delivered stock physically.

        ``quantity`` leaves the row; ``reserved_to_clear`` of the
        reservation it was satisfying is cleared in the same step.
        """
        if quantity < 0 or reserved_to_clear < 0:
            raise ValidationError("Reduction quantities cannot be negative")
        if quantity > self.quantity:
            raise ValidationError(
                f"Cannot reduce stock row {self.stock_id} by {quantity} "
                f"(only {self.quantity} on hand)"
            )
        new_quantity = self.quantity - quantity
        new_reserved = max(ZERO, self.reserved_quantity - reserved_to_clear)
        if new_reserved > new_quantity:
            raise ValidationError(
                f"Reducing stock row {self.stock_id} by {quantity} would leave "
                f"{new_reserved} reserved against {new_quantity} on hand"
            )
        self.quantity = new_quantity
        self.reserved_quantity = new_reserved

    def add(self, quantity: Decimal) -> None:
        """Increase on-hand quantity (returns, receptions, replenishment)."""
        if quantity <= 0:
            raise ValidationError("Added quantity must be positive")
        self.quantity += quantity
