"""Summary rows (totals and averages) shown under the monthly grid and in the export."""
from typing import Any, Dict, List, Sequence

from diners.domain.DinerRow import is_numeric_column
from diners.utilities.numbers import parse_number, round_half_up

__all__ = ["summary_columns", "summarize"]


def summary_columns(visible_columns: Sequence[str]) -> List[str]:
    # Per-row total is derived; excluded
    return [k for k in visible_columns if is_numeric_column(k) and k != "total"]


def summarize(rows: List[Dict[str, Any]], visible_columns: Sequence[str]) -> Dict[str, Dict[str, Any]]:
    """Return {"totals": {key: sum}, "averages": {key: mean over days with a positive value}}.

    A column with no positive value averages to 0.
    """
    keys = summary_columns(visible_columns)
    totals = {k: 0 for k in keys}
    counts = {k: 0 for k in keys}
    for row in rows or []:
        for key in keys:
            val = parse_number(row.get(key))
            totals[key] += val
            if val > 0:
                counts[key] += 1
    averages = {k: (round_half_up(totals[k] / counts[k]) if counts[k] else 0) for k in keys}
    return {"totals": totals, "averages": averages}
