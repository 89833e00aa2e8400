"""Configuration management for the diner-count sheet application."""
import os
from typing import Final, Tuple
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file if it exists
env_path = Path(__file__).parent.parent.parent / '.env'
if env_path.exists():
    load_dotenv(env_path)


def _csv_env(name: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(name, default)
    return tuple(part.strip() for part in raw.split(',') if part.strip())


# Application Settings
APP_HOST: Final[str] = os.getenv('APP_HOST', '0.0.0.0')
APP_PORT: Final[int] = int(os.getenv('APP_PORT', '8000'))
DEBUG: Final[bool] = os.getenv('DEBUG', 'False').lower() == 'true'
LOG_LEVEL: Final[str] = os.getenv('LOG_LEVEL', 'DEBUG' if DEBUG else 'INFO').upper()

# File Paths
BASE_DIR: Final[Path] = Path(__file__).parent.parent
DATA_DIR: Final[Path] = Path(os.getenv('DINERS_DATA_DIR', str(BASE_DIR / 'data')))

# Calendar days of stored timestamps are read in this zone
DINERS_TIMEZONE: Final[str] = os.getenv('DINERS_TIMEZONE', 'Asia/Seoul')

# Upper bound on sheets held in memory by the API
MAX_OPEN_SHEETS: Final[int] = int(os.getenv('MAX_OPEN_SHEETS', '32'))

# Extra diet column classification (school / industrial accounts)
LUNCH_PREFIXES: Final[Tuple[str, ...]] = _csv_env('LUNCH_PREFIXES', '중식')
DINNER_PREFIXES: Final[Tuple[str, ...]] = _csv_env('DINNER_PREFIXES', '석식')

# Industrial "simple meal" branch: names that activate it, and names averaged with the main meal
SIMPLE_MEAL_TRIGGER_NAMES: Final[Tuple[str, ...]] = _csv_env('SIMPLE_MEAL_TRIGGER_NAMES', '간편식,석식')
SIMPLE_MEAL_BASELINE_NAMES: Final[Tuple[str, ...]] = _csv_env('SIMPLE_MEAL_BASELINE_NAMES', '간편식(포케),석식')
