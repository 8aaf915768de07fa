"""Mapping between StockRecord and the ``company_stocks`` JSON shape.

Shared by the REST and JSON-file repositories, which both speak the
back-office API's field names.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any

from stockops.domain.exceptions import StockStoreError
from stockops.domain.model.stock import ZERO, StockRecord

_DECIMAL_FIELDS = ("unit_cost", "selling_price", "width", "length")
_TEXT_FIELDS = ("state", "splicer", "location", "supplier")


def to_raw(record: StockRecord) -> dict[str, Any]:
    raw: dict[str, Any] = {
        "stock_id": record.stock_id,
        "company_id": record.company_id,
        "product_id": record.product_id,
        "quantity": str(record.quantity),
        "reserved_quantity": str(record.reserved_quantity),
        "version": record.version,
    }
    for name in _DECIMAL_FIELDS:
        value = getattr(record, name)
        raw[name] = None if value is None else str(value)
    for name in _TEXT_FIELDS:
        raw[name] = getattr(record, name)
    raw["stock_created_at"] = (
        record.created_at.isoformat() if record.created_at is not None else None
    )
    return raw


def to_domain(raw: dict[str, Any]) -> StockRecord:
    try:
        return StockRecord(
            stock_id=int(raw["stock_id"]),
            company_id=int(raw["company_id"]),
            product_id=int(raw["product_id"]),
            quantity=_decimal(raw.get("quantity")) or ZERO,
            reserved_quantity=_decimal(raw.get("reserved_quantity")) or ZERO,
            unit_cost=_decimal(raw.get("unit_cost")),
            selling_price=_decimal(raw.get("selling_price")),
            state=raw.get("state"),
            splicer=raw.get("splicer"),
            width=_decimal(raw.get("width")),
            length=_decimal(raw.get("length")),
            location=raw.get("location"),
            supplier=raw.get("supplier"),
            created_at=_timestamp(raw.get("stock_created_at")),
            version=int(raw.get("version") or 0),
        )
    except (KeyError, TypeError, ValueError, InvalidOperation) as exc:
        raise StockStoreError(f"Malformed stock record: {raw!r}") from exc


def _decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    return Decimal(str(value))


def _timestamp(value: str | None) -> datetime | None:
    if not value:
        return None
    # MySQL returns "YYYY-MM-DD HH:MM:SS", JavaScript clients send a trailing Z.
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        # Offset-less timestamps are UTC.
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
