"""ExtraDietColumn domain entity: a per-account, dynamically named priced meal category."""
from typing import List

from diners.utilities.constants import EXTRA_DIET_SLOTS


class ExtraDietColumn:
    def __init__(self, name: str = "", price_key: str = ""):
        self.name = (name or "").strip()
        self.price_key = price_key

    def __eq__(self, other):
        if not isinstance(other, ExtraDietColumn):
            return NotImplemented
        return (self.name, self.price_key) == (other.name, other.price_key)

    def __hash__(self):
        return hash((self.name, self.price_key))

    def __str__(self) -> str:
        return f"{self.name} -> {self.price_key}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Accepts both {"name", "priceKey"} and {"name", "price_key"} shapes.'''
        d = dict(data) if isinstance(data, dict) else {}
        return ExtraDietColumn(d.get("name", ""), d.get("price_key") or d.get("priceKey") or "")

    def to_dict(self):
        return {"name": self.name, "priceKey": self.price_key}

    @staticmethod
    def from_account_record(record) -> List["ExtraDietColumn"]:
        '''Build the ordered column list from extra_diet{i}_name fields; blank names are skipped.'''
        columns: List[ExtraDietColumn] = []
        if not isinstance(record, dict):
            return columns
        for idx in range(1, EXTRA_DIET_SLOTS + 1):
            name = str(record.get(f"extra_diet{idx}_name") or "").strip()
            if name:
                columns.append(ExtraDietColumn(name, f"extra_diet{idx}_price"))
        return columns


def signature(columns: List[ExtraDietColumn]) -> str:
    """Stable identity of a column list; changes only when names or keys change."""
    return "|".join(f"{c.price_key}:{c.name}" for c in columns or [])
