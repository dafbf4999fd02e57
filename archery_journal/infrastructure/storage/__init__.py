"""Key-value store backends and the JSON slot adapter."""

from __future__ import annotations

from archery_journal.application.ports.storage import KeyValueStore

from .adapter import PersistentStore
from .config import StorageBackend, StorageSettings
from .files import JsonFileKeyValueStore
from .memory import MemoryKeyValueStore
from .sqlite import SqliteKeyValueStore

__all__ = [
    "JsonFileKeyValueStore",
    "MemoryKeyValueStore",
    "PersistentStore",
    "SqliteKeyValueStore",
    "StorageBackend",
    "StorageSettings",
    "create_store",
]


def create_store(settings: StorageSettings) -> KeyValueStore:
    """Instantiate the key-value backend selected by ``settings``."""

    if settings.backend == StorageBackend.MEMORY:
        return MemoryKeyValueStore()
    if settings.backend == StorageBackend.FILE:
        return JsonFileKeyValueStore(settings.data_dir)
    if settings.backend == StorageBackend.SQLITE:
        return SqliteKeyValueStore(settings.db_path)
    raise ValueError(f"Unsupported storage backend: {settings.backend}")
