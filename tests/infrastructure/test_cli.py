"""End-to-end tests for the ``stockops stock`` commands.

The commands are wired to an in-memory repository by patching the
composition-root functions they import.
"""

from decimal import Decimal

import pytest
from click.testing import CliRunner

from stockops.infrastructure.cli import stock_commands
from stockops.infrastructure.cli.main import cli
from tests.fakes import FakeStockRepository, make_record


@pytest.fixture
def repo(monkeypatch):
    repo = FakeStockRepository([
        make_record(1, product_id=12, quantity=5, location="A-1"),
        make_record(2, product_id=12, quantity=10),
        make_record(3, product_id=15, quantity=2),
    ])
    monkeypatch.setattr(stock_commands, "stock_repository", lambda: repo)
    monkeypatch.setattr(stock_commands, "conflict_retries", lambda: 1)
    return repo


def _run(*args):
    return CliRunner().invoke(cli, ["stock", *args])


class TestCheckCommand:

    def test_all_available(self, repo):
        result = _run("check", "--company", "1", "--items", "12:8,15:2")
        assert result.exit_code == 0
        assert "All items available." in result.output

    def test_insufficient(self, repo):
        result = _run("check", "--company", "1", "--items", "15:3")
        assert result.exit_code == 1
        assert "<< insufficient" in result.output
        assert "Insufficient stock for at least one item" in result.output

    def test_bad_item_format(self, repo):
        result = _run("check", "--company", "1", "--items", "12-8")
        assert result.exit_code == 2
        assert "Expected 'ProductId:Quantity'" in result.output

    def test_bad_product_id(self, repo):
        result = _run("check", "--company", "1", "--items", "abc:8")
        assert result.exit_code == 2
        assert "Invalid product id 'abc'" in result.output


class TestOrderCommands:

    def test_reserve(self, repo):
        result = _run("reserve", "--company", "1", "--items", "12:8", "--order", "40")

        assert result.exit_code == 0
        assert "Stock reserved for order #40." in result.output
        assert "order #40" in result.output
        assert repo.get(1).reserved_quantity == Decimal("5")
        assert repo.get(2).reserved_quantity == Decimal("3")

    def test_reserve_refused(self, repo):
        result = _run("reserve", "--company", "1", "--items", "12:8,15:3", "--order", "40")

        assert result.exit_code == 1
        assert "Insufficient stock for product 15" in result.output
        assert repo.get(1).reserved_quantity == Decimal("0")

    def test_confirm(self, repo):
        _run("reserve", "--company", "1", "--items", "15:2", "--order", "40")

        result = _run("confirm", "--company", "1", "--items", "15:2", "--order", "40")

        assert result.exit_code == 0
        assert "Stock reduced for delivered order #40." in result.output
        assert repo.get(3).quantity == Decimal("0")

    def test_cancel(self, repo):
        _run("reserve", "--company", "1", "--items", "12:4", "--order", "40")

        result = _run("cancel", "--company", "1", "--items", "12:4", "--order", "40")

        assert result.exit_code == 0
        assert "Reservation released for order #40." in result.output
        assert repo.get(1).reserved_quantity == Decimal("0")

    def test_zero_quantity(self, repo):
        result = _run("reserve", "--company", "1", "--items", "12:0", "--order", "40")
        assert result.exit_code == 1
        assert "must be positive" in result.output


class TestAddCommands:

    def test_add(self, repo):
        result = _run(
            "add", "--company", "1", "--product", "15", "--quantity", "3",
            "--reason", "return", "--reference", "9",
        )

        assert result.exit_code == 0
        assert "Added 3 of product 15 to company 1." in result.output
        assert repo.get(3).quantity == Decimal("5")

    def test_add_unknown_reason(self, repo):
        result = _run("add", "--company", "1", "--product", "15", "--quantity", "3", "--reason", "gift")
        assert result.exit_code == 2

    def test_increase(self, repo):
        result = _run(
            "increase", "--company", "1", "--items", "15:1,99:4",
            "--reference", "6", "--reason", "reception_confirmed",
        )

        assert result.exit_code == 0
        assert "Stock increased from slip #6." in result.output
        assert "reception #6" in result.output
        assert repo.get(4).quantity == Decimal("4")


class TestListCommands:

    def test_list(self, repo):
        result = _run("list", "--company", "1")
        assert result.exit_code == 0
        assert "A-1" in result.output
        assert len(result.output.strip().splitlines()) == 5

    def test_list_empty(self, repo):
        result = _run("list", "--company", "3")
        assert result.exit_code == 0
        assert "No stock records found." in result.output

    def test_summary(self, repo):
        result = _run("summary", "--company", "1")
        assert result.exit_code == 0
        assert "Total quantity:    17.00" in result.output
        assert "Low-stock rows:    2" in result.output
