"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

from stockops.domain.exceptions import ValidationError


@dataclass(frozen=True)
class Quantity:
    """A strictly positive stock quantity.

    Marble and stone are sold by the square metre as well as by the piece,
    so quantities are Decimals rather than integers.
    """

    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise ValidationError(
                f"Quantity must be a Decimal, got {type(self.value).__name__}"
            )
        if not self.value.is_finite():
            raise ValidationError(f"Quantity must be a finite number, got {self.value}")
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)

    @staticmethod
    def of(value: str | int | Decimal) -> Quantity:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Quantity(Decimal(str(value).strip()))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid quantity: {value!r}") from exc


@dataclass(frozen=True)
class OrderItemRequest:
    """A requested quantity of one product, as listed on a business document.

    The core does not persist these; they arrive with every call from the
    order / issue-slip workflows.
    """

    product_id: int
    quantity: Decimal

    @staticmethod
    def of(product_id: int, quantity: str | int | Decimal) -> OrderItemRequest:
        return OrderItemRequest(product_id=product_id, quantity=Quantity.of(quantity).value)
