"""Data Access Layer over the sqlite metadata table.

Responsibilities
----------------
- Persist the second tier of the rate cache under a single key.
- Persist the extension settings document.
- Translate sqlite / JSON failures into :class:`StorageError` so callers can
  log them and carry on.
"""

from __future__ import annotations

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from currency_lens.core.errors import StorageError
from .schema import UPSERT_METADATA_SQL, init_db

CACHED_RATES_KEY = "cached_rates"
SETTINGS_KEY = "settings"


class Database:
    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)

    # ------------------------------------------------------------------
    # Connection helpers
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @contextmanager
    def _session(self) -> Iterator[sqlite3.Cursor]:
        try:
            conn = self._connect()
        except sqlite3.Error as e:
            raise StorageError(f"cannot open {self.db_path}: {e}") from e
        try:
            with conn:
                yield conn.cursor()
        except sqlite3.Error as e:
            raise StorageError(f"sqlite error on {self.db_path}: {e}") from e
        finally:
            conn.close()

    def initialize(self) -> None:
        try:
            init_db(self.db_path)
        except sqlite3.Error as e:
            raise StorageError(f"cannot initialize {self.db_path}: {e}") from e

    # ------------------------------------------------------------------
    # Generic metadata access
    def get_metadata(self, key: str) -> Optional[str]:
        with self._session() as cur:
            cur.execute("SELECT value FROM metadata WHERE key=?", (key,))
            row = cur.fetchone()
            return row[0] if row else None

    def set_metadata(self, key: str, value: str) -> None:
        with self._session() as cur:
            cur.execute(UPSERT_METADATA_SQL, (key, value))

    def delete_metadata(self, key: str) -> bool:
        with self._session() as cur:
            cur.execute("DELETE FROM metadata WHERE key=?", (key,))
            return cur.rowcount > 0

    def get_json(self, key: str) -> Optional[Dict[str, Any]]:
        raw = self.get_metadata(key)
        if raw is None:
            return None
        try:
            obj = json.loads(raw)
        except ValueError as e:
            raise StorageError(f"metadata '{key}' is not valid JSON") from e
        if not isinstance(obj, dict):
            raise StorageError(f"metadata '{key}' is not a JSON object")
        return obj

    def set_json(self, key: str, obj: Dict[str, Any]) -> None:
        self.set_metadata(key, json.dumps(obj, separators=(",", ":")))

    # ------------------------------------------------------------------
    # Persisted rate cache
    def load_cached_rates(self) -> Optional[Dict[str, Any]]:
        return self.get_json(CACHED_RATES_KEY)

    def save_cached_rates(self, record: Dict[str, Any]) -> None:
        self.set_json(CACHED_RATES_KEY, record)

    def clear_cached_rates(self) -> bool:
        return self.delete_metadata(CACHED_RATES_KEY)

    # ------------------------------------------------------------------
    # Extension settings
    def load_settings(self) -> Optional[Dict[str, Any]]:
        return self.get_json(SETTINGS_KEY)

    def save_settings(self, settings: Dict[str, Any]) -> None:
        self.set_json(SETTINGS_KEY, settings)
