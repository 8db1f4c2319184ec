"""Database schema DDL definitions and initialization utilities.

Tables:
  - metadata: key/value store holding the persisted rate table
    (``cached_rates``), the extension settings (``settings``) and the schema
    version marker.
"""

from __future__ import annotations
import sqlite3
from typing import Sequence
from pathlib import Path

BASIC_UTC_NOW = "strftime('%Y-%m-%dT%H:%M:%fZ','now')"
SCHEMA_VERSION = 1
SCHEMA_VERSION_KEY = "schema_version"

METADATA_DDL = f"""
CREATE TABLE IF NOT EXISTS metadata (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT ({BASIC_UTC_NOW})
);
"""

DDL_ORDER: Sequence[str] = (METADATA_DDL,)

UPSERT_METADATA_SQL = (
    "INSERT INTO metadata (key, value) VALUES (?, ?) "
    "ON CONFLICT(key) DO UPDATE SET value=excluded.value, "
    f"updated_at=({BASIC_UTC_NOW})"
)


def init_db(path: Path) -> None:
    """Create all tables idempotently and stamp the schema version.

    Parameters
    ----------
    path: Path to SQLite database file.
    """
    conn = sqlite3.connect(path)
    try:
        cur = conn.cursor()
        for ddl in DDL_ORDER:
            cur.execute(ddl)
        cur.execute(UPSERT_METADATA_SQL, (SCHEMA_VERSION_KEY, str(SCHEMA_VERSION)))
        conn.commit()
    finally:
        conn.close()
