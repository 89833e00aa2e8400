"""Change detection between the active grid and its baseline snapshot."""
import re
from typing import Any, Dict, List, Tuple

from diners.domain.DinerRow import is_numeric_column
from diners.utilities.numbers import parse_number

__all__ = ["normalize_for_compare", "row_changed", "changed_rows", "changed_cells"]

_WS = re.compile(r"\s+")
_IGNORED_KEYS = ("diner_date",)


def normalize_for_compare(key: str, value: Any):
    if is_numeric_column(key):
        return parse_number(value)
    if value is None:
        return ""
    if isinstance(value, str):
        return _WS.sub(" ", value.strip())
    return value


def _differing_keys(current: Dict[str, Any], original: Dict[str, Any]) -> List[str]:
    keys = []
    for key, value in current.items():
        if key in _IGNORED_KEYS or key not in original:
            continue
        if normalize_for_compare(key, value) != normalize_for_compare(key, original[key]):
            keys.append(key)
    return keys


def row_changed(current: Dict[str, Any], original: Dict[str, Any]) -> bool:
    return bool(_differing_keys(current, original or {}))


def changed_rows(active: List[Dict[str, Any]], baseline: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Rows of ``active`` that differ from the same-index baseline row."""
    result = []
    for idx, row in enumerate(active):
        original = baseline[idx] if idx < len(baseline) else {}
        if row_changed(row, original):
            result.append(row)
    return result


def changed_cells(active: List[Dict[str, Any]], baseline: List[Dict[str, Any]]) -> List[Tuple[int, str]]:
    """(row index, key) pairs whose value differs from the baseline, for highlighting."""
    cells: List[Tuple[int, str]] = []
    for idx, row in enumerate(active):
        original = baseline[idx] if idx < len(baseline) else {}
        cells.extend((idx, key) for key in _differing_keys(row, original))
    return cells
