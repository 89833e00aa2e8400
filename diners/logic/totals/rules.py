"""Daily total rules.

``compute_total(row, account_type, extra_columns, account_id)`` resolves one
rule per (account id, account type) and applies it. Resolution order, first
match wins:

1. per-account overrides (``ACCOUNT_OVERRIDES``), keyed by account id;
2. school / industrial accounts:
   - the breakfast-main school account averages breakfast with its
     lunch-like and dinner-like extra columns,
   - industrial accounts with simple-meal extra columns average a baseline
     set and add the remaining extras on top,
   - everyone else: main meal plus every extra column;
3. the default rule: mean of breakfast/lunch/dinner plus ceremony.

Every facility has its own menu structure, so the overrides are listed one
by one instead of being derived.
"""
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from diners.domain.AccountProfile import AccountType
from diners.domain.ExtraDietColumn import ExtraDietColumn
from diners.utilities import config
from diners.utilities.constants import BREAKFAST_MAIN_ACCOUNT_ID, LABEL_BREAKFAST, LABEL_LUNCH
from diners.utilities.numbers import parse_number, round_half_up

__all__ = [
    "MealClassifier", "DEFAULT_CLASSIFIER", "ACCOUNT_OVERRIDES",
    "avg_of_existing", "main_meal_key", "resolve_rule", "compute_total",
]

RULE_OVERRIDE = "override"
RULE_PREFIX_AVERAGE = "prefix_average"
RULE_SIMPLE_MEAL = "simple_meal"
RULE_MAIN_PLUS_EXTRAS = "main_plus_extras"
RULE_DEFAULT = "default"

EXTRA_ELIGIBLE_TYPES = (AccountType.SCHOOL, AccountType.INDUSTRIAL)


class MealClassifier:
    """Sorts extra diet columns into lunch-like / dinner-like buckets by name prefix."""

    def __init__(self, lunch_prefixes: Sequence[str] = (), dinner_prefixes: Sequence[str] = (),
                 simple_trigger_names: Sequence[str] = (), simple_baseline_names: Sequence[str] = ()):
        self.lunch_prefixes = tuple(lunch_prefixes)
        self.dinner_prefixes = tuple(dinner_prefixes)
        self.simple_trigger_names = tuple(simple_trigger_names)
        self.simple_baseline_names = tuple(simple_baseline_names)

    @staticmethod
    def _name(col: ExtraDietColumn) -> str:
        return (getattr(col, "name", "") or "").strip()

    def is_lunch(self, col: ExtraDietColumn) -> bool:
        name = self._name(col)
        return bool(self.lunch_prefixes) and name.startswith(self.lunch_prefixes)

    def is_dinner(self, col: ExtraDietColumn) -> bool:
        name = self._name(col)
        return bool(self.dinner_prefixes) and name.startswith(self.dinner_prefixes)

    def has_simple_meal(self, columns: Iterable[ExtraDietColumn]) -> bool:
        return any(self._name(c) in self.simple_trigger_names for c in columns)

    def is_baseline(self, col: ExtraDietColumn, main_label: str) -> bool:
        name = self._name(col)
        return name == main_label or name in self.simple_baseline_names


DEFAULT_CLASSIFIER = MealClassifier(
    lunch_prefixes=config.LUNCH_PREFIXES,
    dinner_prefixes=config.DINNER_PREFIXES,
    simple_trigger_names=config.SIMPLE_MEAL_TRIGGER_NAMES,
    simple_baseline_names=config.SIMPLE_MEAL_BASELINE_NAMES,
)


def avg_of_existing(*values: Any) -> float:
    """Mean of the strictly positive values; 0 and blanks are absent, not zero-valued."""
    present = [n for n in (parse_number(v) for v in values) if n > 0]
    return sum(present) / len(present) if present else 0


def _value(row: Dict[str, Any], key: str):
    return parse_number(row.get(key))


def _extra_sum(row: Dict[str, Any], columns: Iterable[ExtraDietColumn]):
    return sum(_value(row, c.price_key) for c in columns)


# -------------------- Per-account overrides --------------------
def _meals_avg_plus_employ(row):
    """Average of the served meals plus staff."""
    return avg_of_existing(row.get("breakfast"), row.get("lunch"), row.get("dinner")) + _value(row, "employ")


def _daycare_avg_plus_ceremony(row):
    """2nd-floor day care (elderly) meals averaged, plus tube feeding."""
    meals = avg_of_existing(row.get("daycare_breakfast"), row.get("daycare_lunch"), row.get("daycare_diner"))
    return meals + _value(row, "ceremony")


def _floor_avg_plus_two_ceremonies(row):
    """Floors 2-3 meals averaged, plus the 2-3F and 7F tube feeding counts."""
    meals = avg_of_existing(row.get("breakfast"), row.get("lunch"), row.get("dinner"))
    return meals + _value(row, "ceremony") + _value(row, "ceremony2")


def _meals_avg_plus_daycare_lunch(row):
    meals = avg_of_existing(row.get("breakfast"), row.get("lunch"), row.get("dinner"))
    return meals + _value(row, "daycare_lunch")


ACCOUNT_OVERRIDES: Dict[str, Callable[[Dict[str, Any]], float]] = {
    "20250819193617": _meals_avg_plus_employ,
    "20250819193620": _daycare_avg_plus_ceremony,
    "20250819193630": _floor_avg_plus_two_ceremonies,
    "20250919162439": _meals_avg_plus_daycare_lunch,
}


# -------------------- School / industrial --------------------
def main_meal_key(account_id: str) -> str:
    return "breakfast" if account_id == BREAKFAST_MAIN_ACCOUNT_ID else "lunch"


def _prefix_average(row, extras: List[ExtraDietColumn], classifier: MealClassifier):
    lunch = _extra_sum(row, [c for c in extras if classifier.is_lunch(c)])
    dinner = _extra_sum(row, [c for c in extras if classifier.is_dinner(c)])
    return avg_of_existing(_value(row, "breakfast"), lunch, dinner)


def _simple_meal(row, extras: List[ExtraDietColumn], classifier: MealClassifier, main_key: str):
    # Plain mean here: a zero baseline value still counts in the denominator
    main_label = LABEL_BREAKFAST if main_key == "breakfast" else LABEL_LUNCH
    baseline = [_value(row, main_key)]
    other_sum = 0
    for col in extras:
        if classifier.is_baseline(col, main_label):
            baseline.append(_value(row, col.price_key))
        else:
            other_sum += _value(row, col.price_key)
    return sum(baseline) / len(baseline) + other_sum


def resolve_rule(account_type: Any, extra_columns: Optional[Iterable[ExtraDietColumn]] = None,
                 account_id: str = "", classifier: Optional[MealClassifier] = None) -> str:
    """Name the rule that ``compute_total`` applies for this account."""
    account_id = str(account_id or "")
    classifier = classifier or DEFAULT_CLASSIFIER
    extras = list(extra_columns or [])
    if account_id in ACCOUNT_OVERRIDES:
        return RULE_OVERRIDE
    kind = AccountType.resolve(account_type)
    if kind in (AccountType.SCHOOL, AccountType.INDUSTRIAL):
        if account_id == BREAKFAST_MAIN_ACCOUNT_ID:
            return RULE_PREFIX_AVERAGE
        if kind is AccountType.INDUSTRIAL and classifier.has_simple_meal(extras):
            return RULE_SIMPLE_MEAL
        return RULE_MAIN_PLUS_EXTRAS
    return RULE_DEFAULT


def compute_total(row: Dict[str, Any], account_type: Any, extra_columns: Optional[Iterable[ExtraDietColumn]] = None,
                  account_id: str = "", classifier: Optional[MealClassifier] = None) -> int:
    """Return the integer daily total for ``row``. Pure; never raises for unknown accounts."""
    row = row if isinstance(row, dict) else {}
    account_id = str(account_id or "")
    classifier = classifier or DEFAULT_CLASSIFIER
    extras = [c for c in (extra_columns or []) if getattr(c, "price_key", "")]

    rule = resolve_rule(account_type, extras, account_id, classifier)
    if rule == RULE_OVERRIDE:
        return round_half_up(ACCOUNT_OVERRIDES[account_id](row))
    if rule == RULE_PREFIX_AVERAGE:
        return round_half_up(_prefix_average(row, extras, classifier))
    main_key = main_meal_key(account_id)
    if rule == RULE_SIMPLE_MEAL:
        return round_half_up(_simple_meal(row, extras, classifier, main_key))
    if rule == RULE_MAIN_PLUS_EXTRAS:
        return round_half_up(_value(row, main_key) + _extra_sum(row, extras))

    meals = (_value(row, "breakfast") + _value(row, "lunch") + _value(row, "dinner")) / 3
    total = round_half_up(meals + _value(row, "ceremony"))
    if AccountType.resolve(account_type) in EXTRA_ELIGIBLE_TYPES and extras:
        total += round_half_up(_extra_sum(row, extras))
    return total
