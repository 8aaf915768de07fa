import logging

import click

from stockops.infrastructure.cli.stock_commands import (
    stock_add,
    stock_cancel,
    stock_check,
    stock_confirm,
    stock_increase,
    stock_list,
    stock_reserve,
    stock_summary,
)
from stockops.infrastructure.config import get_settings


@click.group()
def cli() -> None:
    """stockops — multi-company stock management"""
    logging.basicConfig(
        level=get_settings().log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def stock() -> None:
    """Manage company stock."""


# Register subcommands
stock.add_command(stock_add)
stock.add_command(stock_cancel)
stock.add_command(stock_check)
stock.add_command(stock_confirm)
stock.add_command(stock_increase)
stock.add_command(stock_list)
stock.add_command(stock_reserve)
stock.add_command(stock_summary)
