"""Configuration helpers for selecting the storage backend."""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Mapping

from i18n import DEFAULT_LANGUAGE, resolve_language


class StorageBackend(str, Enum):
    """Supported key-value store backends."""

    MEMORY = "memory"
    FILE = "file"
    SQLITE = "sqlite"


def _parse_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(slots=True)
class StorageSettings:
    """Strongly-typed settings for storage wiring."""

    backend: StorageBackend = StorageBackend.MEMORY
    data_dir: Path = Path("data")
    db_path: Path = Path("data/journal.db")
    persist_sessions: bool = False
    language: str = DEFAULT_LANGUAGE

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "StorageSettings":
        """Build settings instance from environment variables."""

        data = os.environ if environ is None else environ
        backend_raw = (
            data.get("JOURNAL_STORAGE_BACKEND") or StorageBackend.MEMORY.value
        ).strip().lower()
        try:
            backend = StorageBackend(backend_raw)
        except ValueError as exc:
            raise ValueError(
                f"Unsupported JOURNAL_STORAGE_BACKEND '{backend_raw}'. "
                "Use 'memory', 'file' or 'sqlite'."
            ) from exc

        data_dir_raw = data.get("JOURNAL_DATA_DIR") or None
        db_path_raw = data.get("JOURNAL_DB_PATH") or None
        data_dir = Path(data_dir_raw).expanduser() if data_dir_raw else Path("data")
        db_path = (
            Path(db_path_raw).expanduser() if db_path_raw else data_dir / "journal.db"
        )

        return cls(
            backend=backend,
            data_dir=data_dir,
            db_path=db_path,
            persist_sessions=_parse_bool(data.get("JOURNAL_PERSIST_SESSIONS")),
            language=resolve_language(data.get("JOURNAL_LANGUAGE")),
        )
