"""Tests for the key-value store and the load timeout wrapper."""
import sqlite3
import time
from unittest.mock import patch

import pytest

from frenchie.db import KeyValueStore, StorageTimeout, call_with_timeout, get_connection, init_db


def test_init_db_creates_tables(tmp_db):
    init_db(tmp_db)
    conn = get_connection(tmp_db)
    cursor = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name"
    )
    tables = {row[0] for row in cursor.fetchall()}
    assert "kv_store" in tables
    conn.close()


def test_init_db_is_idempotent(tmp_db):
    init_db(tmp_db)
    init_db(tmp_db)  # should not raise
    conn = get_connection(tmp_db)
    cursor = conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
    assert len(cursor.fetchall()) > 0
    conn.close()


def test_get_missing_key_returns_none(store):
    assert store.get("nope") is None


def test_set_get_and_overwrite(store):
    assert store.set("k", "v1") is True
    assert store.get("k") == "v1"
    assert store.set("k", "v2") is True  # upsert
    assert store.get("k") == "v2"


def test_remove(store):
    store.set("k", "v")
    assert store.remove("k") is True
    assert store.get("k") is None
    assert store.remove("k") is True  # removing twice is fine


def test_set_failure_returns_false(store):
    with patch("frenchie.db.get_connection", side_effect=sqlite3.OperationalError("disk I/O error")):
        assert store.set("k", "v") is False
        assert store.remove("k") is False


def test_get_propagates_sqlite_errors(store):
    with patch("frenchie.db.get_connection", side_effect=sqlite3.OperationalError("locked")):
        with pytest.raises(sqlite3.OperationalError):
            store.get("k")


def test_values_persist_across_store_instances(tmp_db):
    KeyValueStore(tmp_db).set("k", "v")
    assert KeyValueStore(tmp_db).get("k") == "v"


def test_call_with_timeout_returns_result():
    assert call_with_timeout(lambda: 42, timeout=1.0) == 42


def test_call_with_timeout_raises_on_hang():
    start = time.monotonic()
    with pytest.raises(StorageTimeout):
        call_with_timeout(lambda: time.sleep(0.5), timeout=0.05)
    assert time.monotonic() - start < 0.4


def test_call_with_timeout_propagates_errors():
    def boom():
        raise sqlite3.DatabaseError("corrupt")
    with pytest.raises(sqlite3.DatabaseError):
        call_with_timeout(boom, timeout=1.0)
