"""DinerRow domain entity: one calendar day's meal-count record for one account.

Rows are plain dicts (the key set is open-ended because extra diet price
keys vary per account). This module owns the zero-filled template and the
resolution of a persisted record's calendar day.
"""
import re
from datetime import date, datetime
from typing import Any, Dict, Iterable, Optional
from zoneinfo import ZoneInfo

from diners.utilities import config
from diners.utilities.constants import FLAG_COLUMNS, NUMERIC_COLUMNS, READONLY_COLUMNS, TEXT_COLUMNS

__all__ = ["blank_row", "resolve_record_date", "row_date", "is_numeric_column", "is_editable_numeric"]

_DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d", "%Y%m%d")
_DAY_ONLY = re.compile(r"^\d{1,2}$")
_TIME_SEPARATOR = re.compile(r"[T ]")


def blank_row(day: date, extra_columns: Iterable = ()) -> Dict[str, Any]:
    """Zero/blank template for ``day``; every extra price key starts at 0."""
    row: Dict[str, Any] = {
        "diner_date": day,
        "diner_year": day.year,
        "diner_month": day.month,
    }
    for key in NUMERIC_COLUMNS:
        row[key] = 0
    for key in TEXT_COLUMNS:
        row[key] = ""
    row["special_yn"] = "N"
    for col in extra_columns or ():
        row.setdefault(col.price_key, 0)
    return row


def _local_date(moment: datetime) -> date:
    """Calendar day of ``moment``; aware timestamps are read in the configured zone."""
    if moment.tzinfo is not None:
        moment = moment.astimezone(ZoneInfo(config.DINERS_TIMEZONE))
    return moment.date()


def _parse_date_string(text: str) -> Optional[date]:
    text = text.strip()
    if not text:
        return None
    # ISO timestamps: 2025-03-07T00:00:00.000Z, 2025-03-07 09:30:00
    candidate = text.replace("Z", "+00:00")
    try:
        return _local_date(datetime.fromisoformat(candidate))
    except ValueError:
        pass
    # Only a time part may follow the date
    head = _TIME_SEPARATOR.split(text, maxsplit=1)[0]
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(head, fmt).date()
        except ValueError:
            continue
    return None


def resolve_record_date(record: Dict[str, Any]) -> Optional[date]:
    '''Return the calendar day a persisted record belongs to, or None if it cannot be determined.'''
    if not isinstance(record, dict):
        return None
    raw = record.get("diner_date")
    if isinstance(raw, datetime):
        return _local_date(raw)
    if isinstance(raw, date):
        return raw
    if raw is None or isinstance(raw, bool):
        return None
    text = str(raw).strip()
    if _DAY_ONLY.match(text):
        # Saved payloads carry the day alone next to diner_year / diner_month
        try:
            return date(int(record.get("diner_year")), int(record.get("diner_month")), int(text))
        except (TypeError, ValueError):
            return None
    return _parse_date_string(text)


def row_date(row: Dict[str, Any]) -> Optional[date]:
    value = row.get("diner_date") if isinstance(row, dict) else None
    if isinstance(value, datetime):
        return _local_date(value)
    return value if isinstance(value, date) else resolve_record_date(row)


def is_numeric_column(key: str) -> bool:
    """Meal counts and extra diet price keys are numeric; notes, cancels and flags are not."""
    return key in NUMERIC_COLUMNS or (key.startswith("extra_diet") and key.endswith("_price"))


def is_editable_numeric(key: str) -> bool:
    '''Numeric and user-editable: excludes the derived total, the date and flag columns.'''
    return is_numeric_column(key) and key not in READONLY_COLUMNS and key not in FLAG_COLUMNS
