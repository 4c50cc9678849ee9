"""Database connection, DDL, and key-value access for glosario."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from glosario.exceptions import StorageError

SCHEMA_VERSION = "1.0"

# ---------------------------------------------------------------------------
# DDL statements
# ---------------------------------------------------------------------------

_DDL = """
-- Meta table
CREATE TABLE IF NOT EXISTS meta (
    key TEXT NOT NULL,
    value TEXT,
    UNIQUE (key)
);

-- Serialized documents, one per key
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT NOT NULL PRIMARY KEY,
    value TEXT NOT NULL,
    modified TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%f', 'now'))
);
"""


def connect(db_path: str | Path = ":memory:") -> sqlite3.Connection:
    """Open a database connection with glosario PRAGMA settings."""
    db_path_str = str(db_path)
    try:
        conn = sqlite3.connect(db_path_str)
        if db_path_str != ":memory:":
            conn.execute("PRAGMA journal_mode = WAL")
    except sqlite3.Error as e:
        raise StorageError(f"Cannot open database {db_path_str!r}: {e}") from e
    conn.row_factory = sqlite3.Row
    return conn


def init_db(conn: sqlite3.Connection) -> None:
    """Initialize all tables if they don't exist. Set schema version."""
    conn.executescript(_DDL)
    conn.execute(
        "INSERT OR IGNORE INTO meta (key, value) VALUES ('schema_version', ?)",
        (SCHEMA_VERSION,),
    )
    conn.execute(
        "INSERT OR IGNORE INTO meta (key, value) "
        "VALUES ('created_at', strftime('%Y-%m-%dT%H:%M:%f', 'now'))",
    )
    conn.commit()


def check_schema_version(conn: sqlite3.Connection) -> None:
    """Verify the database schema version is compatible."""
    try:
        row = conn.execute(
            "SELECT value FROM meta WHERE key = 'schema_version'"
        ).fetchone()
    except sqlite3.OperationalError:
        # meta table doesn't exist - uninitialized DB
        return
    if row is None:
        return
    version = row[0]
    if version != SCHEMA_VERSION:
        raise StorageError(
            f"Incompatible schema version: {version} "
            f"(expected {SCHEMA_VERSION})"
        )


# ---------------------------------------------------------------------------
# Key-value helpers
# ---------------------------------------------------------------------------

def get_value(conn: sqlite3.Connection, key: str) -> str | None:
    """Return the document stored under *key*, or None."""
    try:
        row = conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
    except sqlite3.Error as e:
        raise StorageError(f"Cannot read key {key!r}: {e}") from e
    return row["value"] if row else None


def set_value(conn: sqlite3.Connection, key: str, value: str) -> None:
    """Insert or replace the document stored under *key*."""
    try:
        with conn:
            conn.execute(
                "INSERT INTO kv_store (key, value) VALUES (?, ?) "
                "ON CONFLICT (key) DO UPDATE SET value = excluded.value, "
                "modified = strftime('%Y-%m-%dT%H:%M:%f', 'now')",
                (key, value),
            )
    except sqlite3.Error as e:
        raise StorageError(f"Cannot write key {key!r}: {e}") from e
