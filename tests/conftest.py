from datetime import datetime, timezone

import pytest

from frenchie.catalog import load_catalog
from frenchie.db import KeyValueStore


@pytest.fixture
def tmp_db(tmp_path):
    """Provide a temporary SQLite database path for tests."""
    db_path = str(tmp_path / "test_frenchie.db")
    return db_path


@pytest.fixture
def store(tmp_db):
    return KeyValueStore(tmp_db)


@pytest.fixture
def catalog():
    return load_catalog()


@pytest.fixture
def now():
    return datetime(2024, 3, 10, 9, 0, tzinfo=timezone.utc)
