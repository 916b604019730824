"""Storage keys and learner-adjustable settings."""
import logging
import sqlite3

from frenchie.db import LOAD_TIMEOUT_SECONDS, KeyValueStore, StorageError, call_with_timeout

logger = logging.getLogger(__name__)

PROGRESS_KEY = "frenchie_progress"
CURRENT_INDEX_KEY = "frenchie_current_index"
STREAK_KEY = "frenchie_streak"
DAILY_GOAL_KEY = "frenchie_daily_goal"
SESSION_SIZE_KEY = "frenchie_session_size"

DEFAULT_DAILY_GOAL = 20
DEFAULT_SESSION_SIZE = 20


def load_value(store: KeyValueStore, key: str, timeout: float = LOAD_TIMEOUT_SECONDS) -> str | None:
    """Read a raw value; storage trouble is logged and reads as missing."""
    try:
        return call_with_timeout(lambda: store.get(key), timeout)
    except (StorageError, sqlite3.Error) as e:
        logger.warning("Error loading %s (using default): %s", key, e)
        return None


def get_setting(store: KeyValueStore, key: str, default: str | None = None) -> str | None:
    value = load_value(store, key)
    return value if value is not None else default


def set_setting(store: KeyValueStore, key: str, value: str) -> bool:
    return store.set(key, value)


def _positive_int(store: KeyValueStore, key: str, default: int) -> int:
    value = get_setting(store, key)
    try:
        parsed = int(value) if value is not None else default
    except ValueError:
        logger.warning("Ignoring non-numeric %s=%r", key, value)
        return default
    return parsed if parsed > 0 else default


def get_daily_goal(store: KeyValueStore) -> int:
    """Cards to get right in one day before the streak counts it."""
    return _positive_int(store, DAILY_GOAL_KEY, DEFAULT_DAILY_GOAL)


def get_session_size(store: KeyValueStore) -> int:
    return _positive_int(store, SESSION_SIZE_KEY, DEFAULT_SESSION_SIZE)
