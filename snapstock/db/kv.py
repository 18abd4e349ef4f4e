"""String key-value persistence on top of SQLite."""

from __future__ import annotations

import sqlite3
from pathlib import Path

from .schema import ensure_schema

THEME_KEY = "app-theme"
PROFILE_KEY = "app-profile"
SCANNED_DATA_KEY = "scanned-data"


class KeyValueStore:
    """Manages the kv_store table. Every write is committed immediately."""

    def __init__(self, db_path: str | Path = "~/.config/snapstock/snapstock.db") -> None:
        self._db_path = db_path
        self._conn: sqlite3.Connection | None = None

    def _get_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = ensure_schema(self._db_path)
        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> KeyValueStore:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def get(self, key: str) -> str | None:
        conn = self._get_conn()
        row = conn.execute(
            "SELECT value FROM kv_store WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else None

    def set(self, key: str, value: str) -> None:
        conn = self._get_conn()
        with conn:
            conn.execute(
                """INSERT INTO kv_store (key, value) VALUES (?, ?)
                   ON CONFLICT(key) DO UPDATE SET
                       value = excluded.value,
                       updated_at = datetime('now', 'localtime')""",
                (key, value),
            )

    def remove(self, key: str) -> None:
        conn = self._get_conn()
        with conn:
            conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))

    def keys(self) -> list[str]:
        conn = self._get_conn()
        rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        return [r["key"] for r in rows]
