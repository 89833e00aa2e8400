"""Monthly grid synthesis.

Builds the dense one-row-per-day grid for an (account, year, month)
selection by overlaying sparse persisted records on zero-filled templates,
and applies single-cell edits without mutating the previous grid.
"""
from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

from diners.domain.DinerRow import blank_row, is_numeric_column, resolve_record_date
from diners.domain.ExtraDietColumn import ExtraDietColumn
from diners.logic.totals.rules import compute_total
from diners.utilities.constants import FLAG_COLUMNS, READONLY_COLUMNS
from diners.utilities.numbers import parse_number

logger = logging.getLogger(__name__)

__all__ = ["days_in_month", "synthesize", "snapshot", "apply_cell_edit"]


def days_in_month(year: int, month: int) -> int:
    return calendar.monthrange(year, month)[1]


def _index_by_day(persisted_rows: Iterable[Dict[str, Any]], year: int, month: int) -> Dict[int, Dict[str, Any]]:
    """Map day-of-month -> first persisted record for that day in (year, month)."""
    index: Dict[int, Dict[str, Any]] = {}
    for record in persisted_rows or []:
        day = resolve_record_date(record)
        if day is None:
            logger.debug("Skipping persisted record without a usable date: %r", record)
            continue
        if (day.year, day.month) != (year, month):
            continue
        index.setdefault(day.day, record)
    return index


def synthesize(persisted_rows: Optional[Iterable[Dict[str, Any]]], year: int, month: int, account_type: Any,
               extra_columns: Optional[List[ExtraDietColumn]] = None, account_id: str = "") -> List[Dict[str, Any]]:
    """Return exactly one row per calendar day of (year, month), totals recomputed.

    Records are matched on their normalized (year, month, day), never on the raw
    date string. Days without a record stay blank with total 0.
    """
    extras = list(extra_columns or [])
    found_by_day = _index_by_day(persisted_rows, year, month)
    rows: List[Dict[str, Any]] = []
    for day_no in range(1, days_in_month(year, month) + 1):
        base = blank_row(date(year, month, day_no), extras)
        found = found_by_day.get(day_no)
        merged = {**base, **found} if found else dict(base)
        # The template owns the calendar identity of the row
        merged["diner_date"] = base["diner_date"]
        merged["diner_year"] = year
        merged["diner_month"] = month
        merged["total"] = compute_total(merged, account_type, extras, account_id)
        rows.append(merged)
    return rows


def snapshot(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Baseline copy used for change detection."""
    return [dict(r) for r in rows]


def apply_cell_edit(rows: List[Dict[str, Any]], row_index: int, key: str, value: Any, account_type: Any,
                    extra_columns: Optional[List[ExtraDietColumn]] = None, account_id: str = "") -> List[Dict[str, Any]]:
    """Return a new grid with one cell changed and that row's total recomputed."""
    if not 0 <= row_index < len(rows):
        raise ValueError(f"Row index out of range: {row_index}")
    if key in READONLY_COLUMNS:
        raise ValueError(f"Column '{key}' is read-only")
    if key in FLAG_COLUMNS:
        value = "Y" if str(value).strip().upper() == "Y" else "N"
    elif is_numeric_column(key):
        value = parse_number(value)
    elif value is None:
        value = ""
    else:
        value = str(value).strip()
    next_rows = list(rows)
    edited = {**rows[row_index], key: value}
    edited["total"] = compute_total(edited, account_type, extra_columns, account_id)
    next_rows[row_index] = edited
    return next_rows
