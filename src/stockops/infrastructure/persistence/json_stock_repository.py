"""JSON-file-backed implementation of StockRepository.

Used for local runs of the CLI without the back-office API.  Rows are
stored in the same shape the API returns; deleted rows are flagged
rather than removed.
"""

from __future__ import annotations

import json
from dataclasses import replace
from datetime import datetime, timezone
from pathlib import Path

from stockops.domain.exceptions import EntityNotFoundError, StaleStockRecordError
from stockops.domain.model.stock import StockRecord
from stockops.domain.repository.stock_repository import StockRepository
from stockops.infrastructure.persistence.serialization import to_domain, to_raw


class JsonStockRepository(StockRepository):

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path
        self._ensure_file()

    # --- StockRepository interface --------------------------------------------

    def list_for_company(self, company_id: int | None) -> list[StockRecord]:
        return [
            to_domain(raw)
            for raw in self._load_raw()
            if not raw.get("deleted")
            and (company_id is None or raw["company_id"] == company_id)
        ]

    def get_by_id(self, stock_id: int, company_id: int) -> StockRecord | None:
        for raw in self._load_raw():
            if (
                raw["stock_id"] == stock_id
                and raw["company_id"] == company_id
                and not raw.get("deleted")
            ):
                return to_domain(raw)
        return None

    def create(self, record: StockRecord) -> StockRecord:
        records = self._load_raw()
        next_id = max((raw["stock_id"] for raw in records), default=0) + 1
        saved = replace(
            record,
            stock_id=next_id,
            created_at=record.created_at or datetime.now(timezone.utc),
            version=1,
        )
        records.append(to_raw(saved))
        self._persist_raw(records)
        return saved

    def update(self, record: StockRecord) -> StockRecord:
        records = self._load_raw()
        for i, raw in enumerate(records):
            if raw["stock_id"] == record.stock_id and not raw.get("deleted"):
                if raw["company_id"] != record.company_id:
                    break
                if raw.get("version", 0) != record.version:
                    raise StaleStockRecordError(record.stock_id, record.version)
                saved = replace(record, version=record.version + 1)
                records[i] = to_raw(saved)
                self._persist_raw(records)
                return saved
        raise EntityNotFoundError(f"Stock record {record.stock_id} not found")

    def delete(self, stock_id: int, company_id: int) -> None:
        records = self._load_raw()
        for raw in records:
            if raw["stock_id"] == stock_id and raw["company_id"] == company_id:
                raw["deleted"] = True
                self._persist_raw(records)
                return
        raise EntityNotFoundError(f"Stock record {stock_id} not found")

    # --- File helpers ---------------------------------------------------------

    def _load_raw(self) -> list[dict]:
        return json.loads(self._file_path.read_text(encoding="utf-8"))

    def _persist_raw(self, records: list[dict]) -> None:
        self._file_path.write_text(
            json.dumps(records, indent=2) + "\n", encoding="utf-8"
        )

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text("[]", encoding="utf-8")
