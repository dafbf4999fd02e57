"""SQLite backed key-value store."""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Iterable, Optional

from archery_journal.application.ports.storage import (
    KeyValueStore,
    StorageUnavailableError,
)

_SETUP_SCRIPT = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""


class SqliteKeyValueStore(KeyValueStore):
    """Persist slots as rows of a single ``kv_store`` table."""

    def __init__(self, db_path: Path | str = Path("data/journal.db")) -> None:
        self._path = Path(db_path)
        self._schema_ready = False

    def get_item(self, key: str) -> Optional[str]:
        try:
            with self._connect() as conn:
                row = conn.execute(
                    "SELECT value FROM kv_store WHERE key = ?", (key,)
                ).fetchone()
        except (sqlite3.Error, UnicodeError) as exc:
            raise StorageUnavailableError(f"Unable to read '{key}' from {self._path}.") from exc
        return None if row is None else str(row["value"])

    def set_item(self, key: str, value: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute(
                    """
                    INSERT INTO kv_store (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = CURRENT_TIMESTAMP
                    """,
                    (key, value),
                )
                conn.commit()
        except (sqlite3.Error, UnicodeError) as exc:
            raise StorageUnavailableError(f"Unable to write '{key}' to {self._path}.") from exc

    def remove_item(self, key: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM kv_store WHERE key = ?", (key,))
                conn.commit()
        except (sqlite3.Error, UnicodeError) as exc:
            raise StorageUnavailableError(f"Unable to remove '{key}' from {self._path}.") from exc

    def keys(self) -> Iterable[str]:
        try:
            with self._connect() as conn:
                rows = conn.execute("SELECT key FROM kv_store ORDER BY key").fetchall()
        except (sqlite3.Error, UnicodeError) as exc:
            raise StorageUnavailableError(f"Unable to list keys in {self._path}.") from exc
        return tuple(str(row["key"]) for row in rows)

    def _connect(self) -> sqlite3.Connection:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise sqlite3.OperationalError(str(exc)) from exc
        conn = sqlite3.connect(self._path)
        conn.row_factory = sqlite3.Row
        if not self._schema_ready:
            conn.executescript(_SETUP_SCRIPT)
            conn.commit()
            self._schema_ready = True
        return conn
