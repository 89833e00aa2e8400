"""AccountProfile domain entity: account id, name, type classification and layout group membership."""
from enum import Enum
from typing import Any

from diners.utilities.constants import DAYCARE_ACCOUNT_IDS, SPECIAL_LAYOUT_IDS


class AccountType(Enum):
    CATERING = 1
    WHOLESALE = 2
    FRANCHISE = 3
    INDUSTRIAL = 4
    SCHOOL = 5
    OTHER = 0

    @property
    def label(self) -> str:
        return _TYPE_LABELS.get(self, "")

    @classmethod
    def resolve(cls, raw: Any) -> "AccountType":
        '''Map a type code (int or numeric string) or its Korean label to an AccountType.'''
        if isinstance(raw, cls):
            return raw
        if raw is None or isinstance(raw, bool):
            return cls.OTHER
        text = str(raw).strip()
        for member, label in _TYPE_LABELS.items():
            if text == label:
                return member
        try:
            return cls(int(text))
        except ValueError:
            return cls.OTHER


_TYPE_LABELS = {
    AccountType.CATERING: "위탁급식",
    AccountType.WHOLESALE: "도소매",
    AccountType.FRANCHISE: "프랜차이즈",
    AccountType.INDUSTRIAL: "산업체",
    AccountType.SCHOOL: "학교",
}


def is_school_or_industrial(account_type: Any) -> bool:
    return AccountType.resolve(account_type) in (AccountType.SCHOOL, AccountType.INDUSTRIAL)


def has_special_layout(account_id: str) -> bool:
    return str(account_id or "") in SPECIAL_LAYOUT_IDS


def is_daycare_visible(account_id: str) -> bool:
    '''Daycare columns show only for daycare accounts that do not use a special layout.'''
    account_id = str(account_id or "")
    return account_id in DAYCARE_ACCOUNT_IDS and not has_special_layout(account_id)


class AccountProfile:
    def __init__(self, account_id: str = "", account_name: str = "", account_type: Any = None):
        self.account_id = str(account_id)
        self.account_name = account_name or ""
        self.account_type = AccountType.resolve(account_type)

    @property
    def is_school(self) -> bool:
        return self.account_type is AccountType.SCHOOL

    @property
    def is_industrial(self) -> bool:
        return self.account_type is AccountType.INDUSTRIAL

    @property
    def tracks_working_day(self) -> bool:
        '''Only school and industrial accounts manage a working-day count beside the grid.'''
        return self.is_school or self.is_industrial

    @property
    def daycare_visible(self) -> bool:
        return is_daycare_visible(self.account_id)

    @property
    def special_layout(self) -> bool:
        return has_special_layout(self.account_id)

    def __str__(self) -> str:
        return f"{self.account_name} ({self.account_id}) - {self.account_type.label or 'other'}"

    __repr__ = __str__

    @staticmethod
    def from_dict(data):
        '''Creates an AccountProfile from an account-list record. Ignores unknown keys.'''
        d = dict(data) if isinstance(data, dict) else {}
        return AccountProfile(
            account_id=d.get("account_id", ""),
            account_name=d.get("account_name", ""),
            account_type=d.get("account_type"),
        )

    def to_dict(self):
        return {
            "account_id": self.account_id,
            "account_name": self.account_name,
            "account_type": self.account_type.value,
            "account_type_label": self.account_type.label,
            "daycare_visible": self.daycare_visible,
            "special_layout": self.special_layout,
        }
