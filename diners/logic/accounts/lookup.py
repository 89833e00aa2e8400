"""Account list helpers: ordering, free-text lookup and the initial selection."""
import re
from typing import Iterable, List, Optional

from diners.domain.AccountProfile import AccountProfile

__all__ = ["PINNED_NAMES", "natural_key", "sort_accounts", "filter_accounts", "find_by_query", "default_selection"]

# Pseudo-accounts that always head the list
PINNED_NAMES = ("ALL", "전체")

_DIGITS = re.compile(r"(\d+)")


def natural_key(text: str):
    """Sort key that orders "2공장" before "10공장"."""
    parts = _DIGITS.split((text or "").strip().lower())
    return [(0, int(p), "") if p.isdigit() else (1, 0, p) for p in parts if p]


def _is_pinned(account: AccountProfile) -> bool:
    return account.account_name.strip().upper() in PINNED_NAMES or account.account_id.upper() in PINNED_NAMES


def sort_accounts(accounts: Iterable[AccountProfile]) -> List[AccountProfile]:
    return sorted(accounts or [], key=lambda a: (not _is_pinned(a), natural_key(a.account_name), a.account_id))


def filter_accounts(accounts: Iterable[AccountProfile], query: Optional[str]) -> List[AccountProfile]:
    """Sorted accounts whose name contains ``query`` (case-insensitive); all of them for a blank query."""
    ordered = sort_accounts(accounts)
    q = (query or "").strip().lower()
    if not q:
        return ordered
    return [a for a in ordered if q in a.account_name.lower()]


def find_by_query(accounts: Iterable[AccountProfile], query: Optional[str]) -> Optional[AccountProfile]:
    """First exact (case-insensitive) name match, else the first partial match, else None."""
    q = (query or "").strip().lower()
    if not q:
        return None
    ordered = sort_accounts(accounts)
    for account in ordered:
        if account.account_name.lower() == q:
            return account
    for account in ordered:
        if q in account.account_name.lower():
            return account
    return None


def default_selection(accounts: Iterable[AccountProfile], requested_id: Optional[str] = None) -> Optional[AccountProfile]:
    ordered = sort_accounts(accounts)
    if requested_id:
        for account in ordered:
            if account.account_id == str(requested_id):
                return account
    return ordered[0] if ordered else None
