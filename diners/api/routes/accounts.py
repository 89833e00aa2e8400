from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from diners.infra.Account_Repository import AccountRepository
from diners.logic.accounts.lookup import filter_accounts, find_by_query

router = APIRouter()


@router.get('/api/accounts')
def list_accounts(q: Optional[str] = Query(default=None, description="Free-text account name filter")):
    """Sorted account list; with ``q`` only matching names, plus the account a lookup would pick."""
    accounts = AccountRepository().list_accounts()
    matched = filter_accounts(accounts, q)
    best = find_by_query(accounts, q)
    return {
        "count": len(matched),
        "accounts": [a.to_dict() for a in matched],
        "selected": best.to_dict() if best else None,
    }


@router.get('/api/accounts/{account_id}/extra-diets')
def account_extra_diets(account_id: str):
    repo = AccountRepository()
    if repo.get_record(account_id) is None:
        raise HTTPException(status_code=404, detail="Account not found")
    columns = repo.extra_diet_columns(account_id)
    return {"account_id": account_id, "extraDiets": [c.to_dict() for c in columns]}
