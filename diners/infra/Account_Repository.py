"""Account repository helpers (file persistence, read-only)."""
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from diners.domain.AccountProfile import AccountProfile
from diners.domain.ExtraDietColumn import ExtraDietColumn
from diners.infra import paths

logger = logging.getLogger(__name__)


class AccountRepository:
    def __init__(self, path: Optional[Path] = None):
        self.path = Path(path) if path is not None else paths.ACCOUNTS_FILE

    def load_records(self) -> List[Dict[str, Any]]:
        """Raw account records; an unreadable file reads as no accounts."""
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f) or []
        except FileNotFoundError:
            logger.warning("Account file not found: %s", self.path)
            return []
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load accounts from %s: %s", self.path, e)
            return []
        return [r for r in data if isinstance(r, dict) and r.get("account_id") not in (None, "")]

    def list_accounts(self) -> List[AccountProfile]:
        return [AccountProfile.from_dict(r) for r in self.load_records()]

    def get_record(self, account_id: str) -> Optional[Dict[str, Any]]:
        for record in self.load_records():
            if str(record.get("account_id")) == str(account_id):
                return record
        return None

    def get_account(self, account_id: str) -> Optional[AccountProfile]:
        record = self.get_record(account_id)
        return AccountProfile.from_dict(record) if record else None

    def extra_diet_columns(self, account_id: str) -> List[ExtraDietColumn]:
        return ExtraDietColumn.from_account_record(self.get_record(account_id) or {})
