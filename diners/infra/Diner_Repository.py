"""Diner record repository (file persistence).

Records are stored per account and month under the key
``{account_id}:{YYYY-MM}`` as a list of sparse day records. Saving upserts
by calendar day, so sending only the changed rows is enough.
"""
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

from diners.domain.DinerRow import resolve_record_date
from diners.infra import paths

logger = logging.getLogger(__name__)


class PersistenceError(Exception):
    """Raised when day records cannot be written; callers keep their in-memory state."""


def _month_key(account_id: str, year: int, month: int) -> str:
    return f"{account_id}:{int(year)}-{int(month):02d}"


def _atomic_write(path: Path, payload) -> None:
    os.makedirs(path.parent, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=str(path.parent), prefix=".diners_", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as tmp:
            json.dump(payload, tmp, indent=2, ensure_ascii=False, default=str)
        shutil.move(tmp_path, str(path))
    finally:
        if os.path.exists(tmp_path):
            os.remove(tmp_path)


class DinerRepository:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else paths.DINERS_FILE

    def _load_store(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                store = json.load(f) or {}
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to read diner records from %s: %s", self.path, e)
            return {}
        if not isinstance(store, dict):
            logger.warning("Ignoring diner store with unexpected shape in %s", self.path)
            return {}
        return store

    def fetch_rows(self, account_id: str, year: int, month: int) -> List[Dict[str, Any]]:
        """Sparse, unordered records for (account, year, month); empty on any read problem."""
        records = self._load_store().get(_month_key(account_id, year, month), [])
        return [dict(r) for r in records if isinstance(r, dict)]

    def save_rows(self, account_id: str, year: int, month: int, rows: List[Dict[str, Any]]) -> int:
        """Upsert ``rows`` by calendar day and return how many were written.

        Raises PersistenceError when the store cannot be written or a row has no usable date.
        """
        store = self._load_store()
        key = _month_key(account_id, year, month)
        by_day: Dict[int, Dict[str, Any]] = {}
        for record in store.get(key, []):
            day = resolve_record_date(record) if isinstance(record, dict) else None
            if day is not None:
                by_day[day.day] = record
        for row in rows:
            day = resolve_record_date(row)
            if day is None or (day.year, day.month) != (int(year), int(month)):
                raise PersistenceError(f"Row without a date in {year}-{int(month):02d}: {row!r}")
            by_day[day.day] = {**by_day.get(day.day, {}), **row}
        store[key] = [by_day[d] for d in sorted(by_day)]
        try:
            _atomic_write(self.path, store)
        except (OSError, TypeError, ValueError) as e:
            logger.error("Failed to save diner records to %s: %s", self.path, e)
            raise PersistenceError(str(e)) from e
        logger.info("Saved %d diner rows for account=%s month=%s", len(rows), account_id, key.split(":")[1])
        return len(rows)
