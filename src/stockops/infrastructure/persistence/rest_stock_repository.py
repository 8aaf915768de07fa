"""StockRepository backed by the back-office REST API (``/company-stocks``).

Transport failures and non-2xx answers are turned into StockStoreError so
``requests`` exceptions never reach the domain.  Updates send the version
that was read, both in the body and as an ``If-Match`` header; the API
answers 409 or 412 when the row has changed in the meantime.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

import requests

from stockops.domain.exceptions import (
    EntityNotFoundError,
    StaleStockRecordError,
    StockStoreError,
)
from stockops.domain.model.stock import StockRecord
from stockops.domain.repository.stock_repository import StockRepository
from stockops.infrastructure.persistence.serialization import to_domain, to_raw

logger = logging.getLogger(__name__)

_CONFLICT_STATUSES = (409, 412)
_CREATE_FIELDS = (
    "company_id",
    "product_id",
    "quantity",
    "reserved_quantity",
    "unit_cost",
    "selling_price",
    "state",
    "splicer",
    "width",
    "length",
    "location",
    "supplier",
)


class RestStockRepository(StockRepository):

    def __init__(
        self,
        base_url: str,
        timeout: float = 10.0,
        page_size: int = 1000,
        session: requests.Session | None = None,
    ) -> None:
        self._url = base_url.rstrip("/") + "/company-stocks"
        self._timeout = timeout
        self._page_size = page_size
        self._session = session or requests.Session()

    # --- StockRepository interface --------------------------------------------

    def list_for_company(self, company_id: int | None) -> list[StockRecord]:
        """Fetch every page of the company's rows."""
        records: list[StockRecord] = []
        page = 1
        while True:
            params: dict[str, Any] = {"page": page, "limit": self._page_size}
            if company_id is not None:
                params["company_id"] = company_id
            body = self._request("GET", self._url, params=params)
            records.extend(to_domain(raw) for raw in body.get("data") or [])

            pagination = body.get("pagination") or {}
            if not pagination.get("has_more_pages"):
                return records
            page += 1

    def get_by_id(self, stock_id: int, company_id: int) -> StockRecord | None:
        try:
            body = self._request(
                "GET", f"{self._url}/{stock_id}", params={"company_id": company_id}
            )
        except EntityNotFoundError:
            return None
        return to_domain(body["data"])

    def create(self, record: StockRecord) -> StockRecord:
        raw = to_raw(record)
        payload = {name: raw[name] for name in _CREATE_FIELDS if raw[name] is not None}
        body = self._request("POST", self._url, json=payload)
        return to_domain(body["data"])

    def update(self, record: StockRecord) -> StockRecord:
        raw = to_raw(record)
        payload = {
            "company_id": record.company_id,
            "quantity": raw["quantity"],
            "reserved_quantity": raw["reserved_quantity"],
            "version": record.version,
        }
        body = self._request(
            "PUT",
            f"{self._url}/{record.stock_id}",
            json=payload,
            headers={"If-Match": str(record.version)},
            stock=record,
        )
        data = body.get("data")
        if data:
            return to_domain(data)
        # Older API builds answer {success: true} only.
        return replace(record, version=record.version + 1)

    def delete(self, stock_id: int, company_id: int) -> None:
        self._request("DELETE", f"{self._url}/{stock_id}", json={"company_id": company_id})

    # --- HTTP helpers ---------------------------------------------------------

    def _request(
        self,
        method: str,
        url: str,
        stock: StockRecord | None = None,
        **kwargs: Any,
    ) -> dict[str, Any]:
        try:
            response = self._session.request(method, url, timeout=self._timeout, **kwargs)
        except requests.RequestException as exc:
            logger.error(
                "Stock API request failed",
                extra={"method": method, "url": url, "error": str(exc)},
            )
            raise StockStoreError(f"{method} {url} failed: {exc}") from exc

        if stock is not None and response.status_code in _CONFLICT_STATUSES:
            raise StaleStockRecordError(stock.stock_id, stock.version)
        if response.status_code == 404:
            raise EntityNotFoundError(f"{method} {url}: not found")
        if not response.ok:
            raise StockStoreError(
                _error_message(response)
                or f"HTTP {response.status_code}: {response.reason}"
            )

        try:
            body = response.json()
        except ValueError as exc:
            raise StockStoreError(f"{method} {url} returned invalid JSON") from exc
        if not isinstance(body, dict) or body.get("success") is False:
            raise StockStoreError(
                (isinstance(body, dict) and body.get("error"))
                or f"{method} {url} was not successful"
            )
        return body


def _error_message(response: requests.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if isinstance(body, dict):
        return body.get("error") or body.get("message")
    return None
