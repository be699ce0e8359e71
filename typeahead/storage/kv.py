"""Key-value persistence backends."""
from __future__ import annotations

import threading
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional, Protocol

import duckdb

from ..errors import StorageError


class KeyValueStore(Protocol):
    """Opaque string store used for history, pinned suggestions and the cache."""

    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def remove(self, key: str) -> None:
        ...


class MemoryKeyValueStore:
    """Process-local store; the default when no database path is configured."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value

    def remove(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)


class DuckDBKeyValueStore:
    """Manage key-value rows stored in a DuckDB file."""

    def __init__(self, db_path: Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._ensure_tables()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def get(self, key: str) -> Optional[str]:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT v FROM kv_store WHERE k = ?", [key]).fetchone()
        except duckdb.Error as exc:
            raise StorageError(f"Unable to read '{key}'") from exc
        return str(row[0]) if row else None

    def set(self, key: str, value: str) -> None:
        now = datetime.now(timezone.utc)
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (k, v, updated_at) VALUES (?, ?, ?)
                    ON CONFLICT (k) DO UPDATE SET v = excluded.v, updated_at = excluded.updated_at
                    """,
                    [key, value, now],
                )
        except duckdb.Error as exc:
            raise StorageError(f"Unable to write '{key}'") from exc

    def remove(self, key: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM kv_store WHERE k = ?", [key])
        except duckdb.Error as exc:
            raise StorageError(f"Unable to remove '{key}'") from exc

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _connect(self) -> duckdb.DuckDBPyConnection:
        return duckdb.connect(str(self._db_path))

    def _ensure_tables(self) -> None:
        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_store (
                    k TEXT PRIMARY KEY,
                    v TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
                """
            )
