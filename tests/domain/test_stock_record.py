"""Unit tests for the StockRecord aggregate."""

from datetime import datetime, timezone
from decimal import Decimal

import pytest

from stockops.domain.exceptions import ValidationError
from tests.fakes import make_record


class TestStockRecordReserve:

    def test_reserve_reduces_available(self):
        rec = make_record(1, product_id=7, quantity=100)
        rec.reserve(Decimal("30"))
        assert rec.available_quantity == Decimal("70")
        assert rec.reserved_quantity == Decimal("30")
        assert rec.quantity == Decimal("100")

    def test_reserve_fractional_quantity(self):
        rec = make_record(1, product_id=7, quantity="12.5")
        rec.reserve(Decimal("2.25"))
        assert rec.available_quantity == Decimal("10.25")

    def test_reserve_more_than_available_rejected(self):
        rec = make_record(1, product_id=7, quantity=10, reserved=4)
        with pytest.raises(ValidationError, match="only 6 available"):
            rec.reserve(Decimal("7"))
        assert rec.reserved_quantity == Decimal("4")

    def test_reserve_zero_rejected(self):
        rec = make_record(1, product_id=7, quantity=10)
        with pytest.raises(ValidationError, match="must be positive"):
            rec.reserve(Decimal("0"))


class TestStockRecordRelease:

    def test_release_increases_available(self):
        rec = make_record(1, product_id=7, quantity=100, reserved=30)
        rec.release(Decimal("10"))
        assert rec.reserved_quantity == Decimal("20")
        assert rec.available_quantity == Decimal("80")

    def test_release_more_than_reserved_rejected(self):
        rec = make_record(1, product_id=7, quantity=100, reserved=10)
        with pytest.raises(ValidationError, match="Cannot release"):
            rec.release(Decimal("11"))


class TestStockRecordReduce:

    def test_reduce_clears_quantity_and_reservation(self):
        rec = make_record(1, product_id=7, quantity=20, reserved=5)
        rec.reduce(Decimal("5"), Decimal("5"))
        assert rec.quantity == Decimal("15")
        assert rec.reserved_quantity == Decimal("0")

    def test_reduce_beyond_on_hand_rejected(self):
        rec = make_record(1, product_id=7, quantity=3)
        with pytest.raises(ValidationError, match="only 3 on hand"):
            rec.reduce(Decimal("4"), Decimal("0"))

    def test_reduce_that_strands_reservation_rejected(self):
        rec = make_record(1, product_id=7, quantity=10, reserved=8)
        with pytest.raises(ValidationError, match="would leave"):
            rec.reduce(Decimal("5"), Decimal("0"))
        assert rec.quantity == Decimal("10")
        assert rec.reserved_quantity == Decimal("8")

    def test_negative_reduction_rejected(self):
        rec = make_record(1, product_id=7, quantity=10)
        with pytest.raises(ValidationError, match="cannot be negative"):
            rec.reduce(Decimal("-1"), Decimal("0"))


class TestStockRecordAdd:

    def test_add_increases_quantity_only(self):
        rec = make_record(1, product_id=7, quantity=10, reserved=2)
        rec.add(Decimal("5"))
        assert rec.quantity == Decimal("15")
        assert rec.reserved_quantity == Decimal("2")

    def test_add_zero_rejected(self):
        rec = make_record(1, product_id=7, quantity=10)
        with pytest.raises(ValidationError, match="must be positive"):
            rec.add(Decimal("0"))


class TestFifoKey:

    def test_older_row_sorts_first(self):
        old = make_record(9, product_id=7, quantity=1, created_at=datetime(2023, 5, 1))
        new = make_record(2, product_id=7, quantity=1, created_at=datetime(2024, 5, 1))
        assert sorted([new, old], key=lambda r: r.fifo_key) == [old, new]

    def test_same_timestamp_falls_back_to_id(self):
        ts = datetime(2024, 1, 1)
        a = make_record(3, product_id=7, quantity=1, created_at=ts)
        b = make_record(1, product_id=7, quantity=1, created_at=ts)
        assert sorted([a, b], key=lambda r: r.fifo_key) == [b, a]

    def test_undated_rows_sort_before_dated_ones(self):
        dated = make_record(1, product_id=7, quantity=1)
        undated = make_record(5, product_id=7, quantity=1, created_at=None)
        assert sorted([dated, undated], key=lambda r: r.fifo_key) == [undated, dated]

    def test_naive_and_aware_timestamps_compare_as_utc(self):
        naive = make_record(1, product_id=7, quantity=1, created_at=datetime(2024, 1, 1, 10))
        aware = make_record(
            2, product_id=7, quantity=1, created_at=datetime(2024, 1, 1, 9, tzinfo=timezone.utc)
        )
        assert sorted([naive, aware], key=lambda r: r.fifo_key) == [aware, naive]
