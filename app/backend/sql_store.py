from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional

from app.diag.tracer import trace


def _ensure_conn(path: Path) -> sqlite3.Connection:
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    with conn:
        conn.execute(
            "CREATE TABLE IF NOT EXISTS kv (key TEXT PRIMARY KEY, value TEXT NOT NULL)")
    return conn


def reset(path: Path) -> None:
    if path.exists():
        path.unlink()


class SqlKeyValue:
    """Durable string key-value storage in a single sqlite file.

    Every call opens and commits its own connection so a write is on disk
    before the call returns.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def get_item(self, key: str) -> Optional[str]:
        conn = _ensure_conn(self.path)
        try:
            row = conn.execute("SELECT value FROM kv WHERE key=?", (key,)).fetchone()
        finally:
            conn.close()
        trace("kv_get", key=key, hit=row is not None)
        return row[0] if row else None

    def set_item(self, key: str, value: str) -> None:
        conn = _ensure_conn(self.path)
        try:
            with conn:
                conn.execute(
                    "INSERT INTO kv(key, value) VALUES (?, ?) "
                    "ON CONFLICT(key) DO UPDATE SET value=excluded.value",
                    (key, str(value)),
                )
        finally:
            conn.close()
        trace("kv_set", key=key, size=len(str(value)))

    def remove_item(self, key: str) -> None:
        conn = _ensure_conn(self.path)
        try:
            with conn:
                conn.execute("DELETE FROM kv WHERE key=?", (key,))
        finally:
            conn.close()
        trace("kv_remove", key=key)

    def clear(self) -> None:
        conn = _ensure_conn(self.path)
        try:
            with conn:
                conn.execute("DELETE FROM kv")
        finally:
            conn.close()
        trace("kv_clear")
