"""Composition root — wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from pathlib import Path

from stockops.domain.repository.stock_repository import StockRepository
from stockops.infrastructure.config import get_settings
from stockops.infrastructure.persistence.json_stock_repository import (
    JsonStockRepository,
)
from stockops.infrastructure.persistence.rest_stock_repository import (
    RestStockRepository,
)


def stock_repository() -> StockRepository:
    settings = get_settings()
    if settings.store_backend == "rest":
        return RestStockRepository(
            settings.api_base_url,
            timeout=settings.api_timeout,
            page_size=settings.page_size,
        )
    return JsonStockRepository(Path(settings.data_dir) / "company_stocks.json")


def conflict_retries() -> int:
    return get_settings().conflict_retries
