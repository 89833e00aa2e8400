"""Header and column layout per account.

``build_layout(account_id, daycare_visible, extra_columns, account_type)``
returns the LayoutDescriptor shared by the table renderer and the export.
School and industrial accounts get a single flat header; the accounts in
SPECIAL_LAYOUT_IDS each get a hand-specified two-row header matching the
facility's menu (floors, residents vs. staff, day care vs. nursing home);
everyone else gets the default header.
"""
from typing import Any, Dict, Iterable, List, Optional, Tuple

from diners.domain.AccountProfile import AccountType
from diners.domain.ExtraDietColumn import ExtraDietColumn
from diners.domain.LayoutDescriptor import HeaderCell, LayoutDescriptor
from diners.logic.totals.rules import main_meal_key
from diners.utilities.constants import (
    BREAKFAST_MAIN_ACCOUNT_ID,
    LABEL_BREAKFAST, LABEL_LUNCH, LABEL_DINNER, LABEL_CEREMONY, LABEL_STUDENT,
    LABEL_DATE, LABEL_SPECIAL_YN, LABEL_EMPLOY, LABEL_TOTAL, LABEL_NOTE,
    LABEL_BREAKFAST_CANCEL, LABEL_LUNCH_CANCEL, LABEL_DINNER_CANCEL,
    LABEL_DAYCARE_LUNCH, LABEL_DAYCARE_DINNER,
)

__all__ = ["build_layout", "SPECIAL_LAYOUTS", "main_meal_label"]

_TAIL_KEYS = ["total", "note", "breakcancel", "lunchcancel", "dinnercancel"]
_TAIL_LABELS = [LABEL_TOTAL, LABEL_NOTE, LABEL_BREAKFAST_CANCEL, LABEL_LUNCH_CANCEL, LABEL_DINNER_CANCEL]


def _tall(label: str) -> HeaderCell:
    return HeaderCell(label, row_span=2)


def _group(label: str, width: int) -> HeaderCell:
    return HeaderCell(label, col_span=width)


def _sub(*labels: str) -> List[HeaderCell]:
    return [HeaderCell(label) for label in labels]


def _two_row(top: List[HeaderCell], bottom: List[HeaderCell], keys: List[str]) -> Tuple:
    top = [_tall(LABEL_DATE)] + top + [_tall(label) for label in _TAIL_LABELS]
    return [top, bottom], keys + _TAIL_KEYS


_MEALS_TALL = [_tall(LABEL_BREAKFAST), _tall(LABEL_LUNCH), _tall(LABEL_DINNER)]
_BLD = (LABEL_BREAKFAST, LABEL_LUNCH, LABEL_DINNER)

SPECIAL_LAYOUTS: Dict[str, Tuple[List[List[HeaderCell]], List[str]]] = {
    # Staff split into breakfast / lunch / dinner
    "20250819193610": _two_row(
        _MEALS_TALL + [_tall(LABEL_CEREMONY), _group(LABEL_EMPLOY, 3)],
        _sub(*_BLD),
        ["breakfast", "lunch", "dinner", "ceremony", "employ_breakfast", "employ_lunch", "employ_dinner"],
    ),
    # 2F day care (elderly), 3F-5F nursing home, day care staff breakfast, nursing home staff
    "20250819193620": _two_row(
        [_group("2층 주간보호(어르신)", 3), _group("3층-5층 요양원(어르신)", 3), _tall(LABEL_CEREMONY),
         _tall("2층 주간보호(직원조식)"), _group("요양원직원", 2)],
        _sub(*_BLD, *_BLD, LABEL_BREAKFAST, LABEL_LUNCH),
        ["daycare_breakfast", "daycare_lunch", "daycare_diner", "breakfast", "lunch", "dinner", "ceremony",
         "daycare_employ_breakfast", "employ_breakfast", "employ_lunch"],
    ),
    # Day care lunch/dinner, staff lunch split between nursing home and day care
    "20250819193603": _two_row(
        _MEALS_TALL + [_group("주간보호", 2), _tall("직원(조식)"), _group("직원(중식)", 2), _tall("직원(석식)")],
        _sub(LABEL_LUNCH, LABEL_DINNER, "요양원", "주간보호"),
        ["breakfast", "lunch", "dinner", "daycare_lunch", "daycare_diner", "employ_breakfast", "employ_lunch",
         "daycare_employ_lunch", "daycare_employ_dinner"],
    ),
    # Staff lunch / dinner
    "20250819193502": _two_row(
        _MEALS_TALL + [_tall(LABEL_CEREMONY), _group(LABEL_EMPLOY, 2)],
        _sub(LABEL_LUNCH, LABEL_DINNER),
        ["breakfast", "lunch", "dinner", "ceremony", "employ_lunch", "employ_dinner"],
    ),
    # Day care elderly and staff, plus three staff meals
    "20250819193632": _two_row(
        _MEALS_TALL + [_tall(LABEL_CEREMONY), _group("주간보호(어르신)", 2), _group("주간보호(직원)", 2),
                       _group(LABEL_EMPLOY, 3)],
        _sub(LABEL_LUNCH, LABEL_DINNER, LABEL_LUNCH, LABEL_DINNER, *_BLD),
        ["breakfast", "lunch", "dinner", "ceremony", "daycare_lunch", "daycare_diner", "daycare_employ_lunch",
         "daycare_employ_dinner", "employ_breakfast", "employ_lunch", "employ_dinner"],
    ),
    # Staff breakfast / lunch
    "20250819193523": _two_row(
        _MEALS_TALL + [_tall(LABEL_CEREMONY), _group(LABEL_EMPLOY, 2)],
        _sub(LABEL_BREAKFAST, LABEL_LUNCH),
        ["breakfast", "lunch", "dinner", "ceremony", "employ_breakfast", "employ_lunch"],
    ),
    # Single header row with a day care lunch column
    "20250819193544": (
        [_sub(LABEL_DATE, *_BLD, LABEL_CEREMONY, "주간보호 중식", LABEL_EMPLOY, *_TAIL_LABELS)],
        ["breakfast", "lunch", "dinner", "ceremony", "daycare_lunch", "employ"] + _TAIL_KEYS,
    ),
    "20250819193634": _two_row(
        _MEALS_TALL + [_tall(LABEL_CEREMONY), _group(LABEL_EMPLOY, 3)],
        _sub(*_BLD),
        ["breakfast", "lunch", "dinner", "ceremony", "employ_breakfast", "employ_lunch", "employ_dinner"],
    ),
    # Floors 2-3 and floor 7, tube feeding per floor group, staff breakfast / lunch
    "20250819193630": _two_row(
        [_group("2,3층", 3), _group("7층", 3), _group(LABEL_CEREMONY, 2), _group(LABEL_EMPLOY, 2)],
        _sub(*_BLD, *_BLD, "2,3층", "7층", LABEL_BREAKFAST, LABEL_LUNCH),
        ["breakfast", "lunch", "dinner", "breakfast2", "lunch2", "dinner2", "ceremony", "ceremony2",
         "employ_breakfast", "employ_lunch"],
    ),
}


def main_meal_label(account_id: str, account_type: Any) -> str:
    if account_id == BREAKFAST_MAIN_ACCOUNT_ID:
        return LABEL_BREAKFAST
    return LABEL_STUDENT if AccountType.resolve(account_type) is AccountType.SCHOOL else LABEL_LUNCH


def _school_or_industrial_layout(account_id: str, extras: List[ExtraDietColumn], account_type: Any):
    header = [HeaderCell(LABEL_DATE), HeaderCell(main_meal_label(account_id, account_type)),
              HeaderCell(LABEL_SPECIAL_YN)]
    header += [HeaderCell(col.name) for col in extras]
    header += [HeaderCell(LABEL_TOTAL), HeaderCell(LABEL_NOTE)]
    keys = [main_meal_key(account_id), "special_yn"] + [col.price_key for col in extras] + ["total", "note"]
    return LayoutDescriptor([header], keys)


def _default_layout(daycare_visible: bool, extras: List[ExtraDietColumn]):
    labels = [LABEL_DATE, *_BLD, LABEL_CEREMONY] + [col.name for col in extras]
    keys = ["breakfast", "lunch", "dinner", "ceremony"] + [col.price_key for col in extras]
    if daycare_visible:
        labels += [LABEL_DAYCARE_LUNCH, LABEL_DAYCARE_DINNER]
        keys += ["daycare_lunch", "daycare_diner"]
    labels += [LABEL_EMPLOY] + _TAIL_LABELS
    keys += ["employ"] + _TAIL_KEYS
    return LayoutDescriptor([_sub(*labels)], keys)


def build_layout(account_id: str, daycare_visible: bool = False,
                 extra_columns: Optional[Iterable[ExtraDietColumn]] = None,
                 account_type: Any = None) -> LayoutDescriptor:
    """Return a fresh LayoutDescriptor for the account (never shared between calls)."""
    account_id = str(account_id or "")
    extras = [c for c in (extra_columns or []) if getattr(c, "price_key", "")]
    if AccountType.resolve(account_type) in (AccountType.SCHOOL, AccountType.INDUSTRIAL):
        return _school_or_industrial_layout(account_id, extras, account_type)
    if account_id in SPECIAL_LAYOUTS:
        header_rows, keys = SPECIAL_LAYOUTS[account_id]
        return LayoutDescriptor([list(row) for row in header_rows], list(keys))
    return _default_layout(bool(daycare_visible), extras)
