"""
Repository for the portal's tables.

Each table is a JSON file of rows under ``<data_dir>/tables``. Calls are
independent request/response operations: there are no transactions, and
concurrent writers are last-write-wins. Rows are plain dicts; services
validate them against the pydantic models in domain.models.
"""
from __future__ import annotations

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel

from domain.policies import PortalPolicies

from . import config
from .monitoring import get_logger

logger = get_logger(__name__)

T = TypeVar("T", bound=BaseModel)


class RepositoryError(RuntimeError):
    """A storage call failed."""


class RecordNotFound(RepositoryError):
    pass


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def new_id() -> str:
    return str(uuid.uuid4())


class Repository:
    def __init__(self, data_dir: Path | None = None) -> None:
        self.data_dir = data_dir or config.data_dir()
        self.tables_dir = self.data_dir / "tables"
        self.tables_dir.mkdir(parents=True, exist_ok=True)

    # -- raw table access --------------------------------------------------
    def _table_path(self, table: str) -> Path:
        if not table or not table.replace("_", "").isalnum():
            raise RepositoryError(f"Invalid table name: {table!r}")
        return self.tables_dir / f"{table}.json"

    def _read(self, table: str) -> List[Dict[str, Any]]:
        fp = self._table_path(table)
        if not fp.exists():
            return []
        try:
            rows = json.loads(fp.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise RepositoryError(f"Table {table} is corrupt: {e}")
        if not isinstance(rows, list):
            raise RepositoryError(f"Table {table} must hold a list of rows")
        return rows

    def _write(self, table: str, rows: List[Dict[str, Any]]) -> None:
        fp = self._table_path(table)
        fp.write_text(json.dumps(rows, indent=2, ensure_ascii=False), encoding="utf-8")

    # -- CRUD --------------------------------------------------------------
    def select(
        self,
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[Dict[str, Any]]:
        rows = self._read(table)
        for key, value in (filters or {}).items():
            rows = [r for r in rows if r.get(key) == value]
        if order_by:
            present = [r for r in rows if r.get(order_by) is not None]
            missing = [r for r in rows if r.get(order_by) is None]
            present.sort(key=lambda r: r[order_by], reverse=descending)
            # Rows without the column always come last
            rows = present + missing
        return rows

    def get(self, table: str, row_id: str) -> Dict[str, Any]:
        for r in self._read(table):
            if r.get("id") == row_id:
                return r
        raise RecordNotFound(f"{table}/{row_id} not found")

    def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._read(table)
        item = dict(row)
        item.setdefault("id", new_id())
        item.setdefault("created_at", now_iso())
        if any(r.get("id") == item["id"] for r in rows):
            raise RepositoryError(f"{table}/{item['id']} already exists")
        rows.append(item)
        self._write(table, rows)
        logger.debug(f"insert {table}/{item['id']}")
        return item

    def update(self, table: str, row_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        rows = self._read(table)
        for i, r in enumerate(rows):
            if r.get("id") == row_id:
                merged = {**r, **changes, "id": row_id}
                rows[i] = merged
                self._write(table, rows)
                logger.debug(f"update {table}/{row_id}: {sorted(changes)}")
                return merged
        raise RecordNotFound(f"{table}/{row_id} not found")

    def delete(self, table: str, row_id: str) -> None:
        rows = self._read(table)
        kept = [r for r in rows if r.get("id") != row_id]
        if len(kept) == len(rows):
            raise RecordNotFound(f"{table}/{row_id} not found")
        self._write(table, kept)
        logger.debug(f"delete {table}/{row_id}")

    # -- typed helpers -----------------------------------------------------
    def fetch(
        self,
        model: Type[T],
        table: str,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> List[T]:
        return [model.model_validate(r) for r in self.select(table, filters, order_by, descending)]

    def fetch_one(self, model: Type[T], table: str, row_id: str) -> T:
        return model.model_validate(self.get(table, row_id))

    # -- config ------------------------------------------------------------
    def load_policies(self) -> PortalPolicies:
        fp = self.data_dir / "policies.json"
        if not fp.exists():
            return PortalPolicies()
        try:
            raw = json.loads(fp.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning(f"Ignoring unreadable policies.json: {e}")
            return PortalPolicies()
        pol = PortalPolicies()
        pol.version = raw.get("version", pol.version)
        pol.minCalibrationPoints = max(3, int(raw.get("minCalibrationPoints", pol.minCalibrationPoints)))
        pol.jitterSpan = float(raw.get("jitterSpan", pol.jitterSpan))
        pol.boundsPadding = float(raw.get("boundsPadding", pol.boundsPadding))
        pol.positionDecimals = int(raw.get("positionDecimals", pol.positionDecimals))
        pol.pathEraseRadius = float(raw.get("pathEraseRadius", pol.pathEraseRadius))
        pol.arrowEraseThreshold = float(raw.get("arrowEraseThreshold", pol.arrowEraseThreshold))
        pol.minArrowSpan = float(raw.get("minArrowSpan", pol.minArrowSpan))
        pol.historyLimit = int(raw.get("historyLimit", pol.historyLimit))
        pol.defaultCurrency = str(raw.get("defaultCurrency", pol.defaultCurrency))
        return pol
