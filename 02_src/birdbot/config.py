"""Project-level configuration, path helpers and tunables."""

from pathlib import Path
from typing import Union

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
DATA_DIR = PROJECT_ROOT / "03_data"
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_SESSION_PATH = DATA_DIR / "sessions.json"
DEFAULT_DB_PATH = DATA_DIR / "search_log.db"
DEFAULT_LOG_PATH = LOGS_DIR / "app.log"

DATA_DIR.mkdir(parents=True, exist_ok=True)
LOGS_DIR.mkdir(parents=True, exist_ok=True)

EBIRD_BASE_URL = "https://api.ebird.org/v2"
TELEGRAM_API_URL = "https://api.telegram.org"

# Result presentation
ITEMS_PER_PAGE = 5
SUMMARY_CHAR_BUDGET = 3800
MESSAGE_CHAR_BUDGET = 4000
MAX_HOTSPOT_CANDIDATES = 8
UPSTREAM_MAX_RESULTS = 100
NEARBY_DISTANCES_KM = (5, 10, 15, 20, 25)

# Throttling
RATE_WINDOW_SECONDS = 60.0
RATE_MAX_REQUESTS = 15

# Session snapshot
SNAPSHOT_INTERVAL_SECONDS = 30.0
SNAPSHOT_MAX_AGE_SECONDS = 60 * 60

# Upstream only serves this many days of history
MAX_LOOKBACK_DAYS = 30


PathLike = Union[str, Path]


def _resolve_path(env_value: PathLike | None, default: Path) -> PathLike:
    if not env_value:
        return default

    if str(env_value) == ":memory:":
        return ":memory:"

    candidate = Path(env_value)
    return candidate if candidate.is_absolute() else PROJECT_ROOT / candidate


def resolve_db_path(env_value: PathLike | None = None) -> PathLike:
    """Resolve SEARCH_LOG_DB to an absolute path."""
    return _resolve_path(env_value, DEFAULT_DB_PATH)


def resolve_session_path(env_value: PathLike | None = None) -> Path:
    """Resolve SESSION_FILE to an absolute path."""
    resolved = _resolve_path(env_value, DEFAULT_SESSION_PATH)
    if resolved == ":memory:":
        raise ValueError("Session snapshot requires a file path")
    return Path(resolved)
