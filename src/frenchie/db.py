"""Key-value storage backing learner progress, plus the load timeout wrapper."""
import logging
import sqlite3
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from pathlib import Path
from typing import Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

DEFAULT_DB_PATH = str(Path.home() / ".frenchie" / "frenchie.db")
LOAD_TIMEOUT_SECONDS = 2.0

SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT DEFAULT CURRENT_TIMESTAMP
);
"""

T = TypeVar("T")


class StorageError(Exception):
    """Storage could not serve a request."""


class StorageTimeout(StorageError):
    """A storage call did not finish within its time budget."""


def get_connection(db_path: str = DEFAULT_DB_PATH) -> sqlite3.Connection:
    """Return a SQLite connection with row factory enabled."""
    conn = sqlite3.connect(db_path)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database, creating the key-value table if it doesn't exist."""
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(db_path)
    conn.executescript(SCHEMA)
    conn.commit()
    conn.close()


class KeyValueStore:
    """String key-value store on top of a single SQLite table.

    ``get`` propagates ``sqlite3.Error`` so callers can decide on a
    fallback; ``set`` and ``remove`` are best-effort and report failure
    through their return value.
    """

    def __init__(self, db_path: str = DEFAULT_DB_PATH):
        self.db_path = db_path
        init_db(db_path)

    def get(self, key: str) -> Optional[str]:
        conn = get_connection(self.db_path)
        try:
            row = conn.execute("SELECT value FROM kv_store WHERE key = ?", (key,)).fetchone()
        finally:
            conn.close()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> bool:
        try:
            conn = get_connection(self.db_path)
            try:
                conn.execute(
                    """INSERT INTO kv_store (key, value, updated_at) VALUES (?, ?, CURRENT_TIMESTAMP)
                    ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at=CURRENT_TIMESTAMP""",
                    (key, value),
                )
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning("Error saving %s: %s", key, e)
            return False
        return True

    def remove(self, key: str) -> bool:
        try:
            conn = get_connection(self.db_path)
            try:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                conn.commit()
            finally:
                conn.close()
        except sqlite3.Error as e:
            logger.warning("Error removing %s: %s", key, e)
            return False
        return True


def call_with_timeout(fn: Callable[[], T], timeout: float = LOAD_TIMEOUT_SECONDS) -> T:
    """Run ``fn`` on a worker thread and wait at most ``timeout`` seconds.

    Raises StorageTimeout when the deadline passes. The worker is abandoned,
    not joined, so a hung storage call cannot block the caller.
    """
    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="frenchie-load")
    future = executor.submit(fn)
    try:
        return future.result(timeout=timeout)
    except FutureTimeout:
        future.cancel()
        raise StorageTimeout(f"storage call exceeded {timeout}s") from None
    finally:
        executor.shutdown(wait=False)
