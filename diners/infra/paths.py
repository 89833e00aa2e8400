from pathlib import Path

from diners.utilities.config import DATA_DIR as _CONFIGURED_DATA_DIR

# Centralized paths for data files (single source of truth)
DATA_DIR = Path(_CONFIGURED_DATA_DIR).resolve()
ACCOUNTS_FILE = DATA_DIR / 'accounts.json'
DINERS_FILE = DATA_DIR / 'diners.json'

__all__ = ['DATA_DIR', 'ACCOUNTS_FILE', 'DINERS_FILE']
