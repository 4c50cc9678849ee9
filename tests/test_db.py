import sqlite3

import pytest

from glosario import db
from glosario.db import SCHEMA_VERSION, check_schema_version
from glosario.exceptions import StorageError


@pytest.fixture
def db_conn():
    """Create an in-memory database connection for testing."""
    conn = db.connect(":memory:")
    db.init_db(conn)
    yield conn
    conn.close()


def test_init_sets_schema_version(db_conn):
    row = db_conn.execute(
        "SELECT value FROM meta WHERE key='schema_version'"
    ).fetchone()
    assert row[0] == SCHEMA_VERSION


def test_init_is_idempotent(db_conn):
    db.init_db(db_conn)
    count = db_conn.execute("SELECT COUNT(*) FROM meta").fetchone()[0]
    assert count == 2


def test_missing_key(db_conn):
    assert db.get_value(db_conn, "wordLists") is None


def test_set_and_replace(db_conn):
    db.set_value(db_conn, "wordLists", "[]")
    db.set_value(db_conn, "wordLists", '[{"id": "default"}]')
    assert db.get_value(db_conn, "wordLists") == '[{"id": "default"}]'
    count = db_conn.execute("SELECT COUNT(*) FROM kv_store").fetchone()[0]
    assert count == 1


def test_closed_connection_raises_storage_error():
    conn = db.connect(":memory:")
    db.init_db(conn)
    conn.close()
    with pytest.raises(StorageError):
        db.get_value(conn, "wordLists")
    with pytest.raises(StorageError):
        db.set_value(conn, "wordLists", "[]")


def test_incompatible_schema_version():
    """Test that check_schema_version raises StorageError for incompatible version."""
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE meta (key TEXT, value TEXT)")
    conn.execute("INSERT INTO meta (key, value) VALUES ('schema_version', '99.9')")

    with pytest.raises(StorageError, match=rf"Incompatible schema version: 99.9 \(expected {SCHEMA_VERSION}\)"):
        check_schema_version(conn)
    conn.close()


def test_uninitialized_database():
    """Test that check_schema_version returns for uninitialized database (no meta table)."""
    conn = sqlite3.connect(":memory:")
    try:
        check_schema_version(conn)
    except Exception as e:
        pytest.fail(f"check_schema_version raised unexpected exception: {e}")
    conn.close()


def test_compatible_schema_version():
    """Test that check_schema_version passes for compatible version."""
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE meta (key TEXT, value TEXT)")
    conn.execute("INSERT INTO meta (key, value) VALUES ('schema_version', ?)", (SCHEMA_VERSION,))

    try:
        check_schema_version(conn)
    except Exception as e:
        pytest.fail(f"check_schema_version raised unexpected exception: {e}")
    conn.close()
