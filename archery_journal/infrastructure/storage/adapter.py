"""JSON slot adapter that never lets storage failures reach the caller.

Reads of missing, unreadable or malformed slots come back as the supplied
default. Writes report success as a boolean; a failed write leaves the
caller's in-memory state authoritative for the rest of the process.
"""

from __future__ import annotations

import json
from typing import Any

from archery_journal.application.ports.storage import (
    KeyValueStore,
    StorageUnavailableError,
)
from utils.logger import get_logger

logger = get_logger(__name__)


class PersistentStore:
    """Read and write JSON values in named slots of a :class:`KeyValueStore`."""

    def __init__(self, backend: KeyValueStore) -> None:
        self._backend = backend

    @property
    def backend(self) -> KeyValueStore:
        return self._backend

    def load(self, key: str, default: Any = None) -> Any:
        try:
            raw = self._backend.get_item(key)
        except StorageUnavailableError as exc:
            logger.warning(
                "Storage read failed: %s", exc, extra={"slot": key, "op": "load"}
            )
            return default
        if raw is None or not raw.strip():
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning(
                "Ignoring malformed JSON in storage slot",
                extra={"slot": key, "op": "load"},
            )
            return default

    def save(self, key: str, value: Any) -> bool:
        try:
            payload = json.dumps(value, ensure_ascii=False)
        except (TypeError, ValueError) as exc:
            logger.warning(
                "Value is not JSON serialisable: %s", exc, extra={"slot": key, "op": "save"}
            )
            return False
        try:
            self._backend.set_item(key, payload)
        except StorageUnavailableError as exc:
            logger.warning(
                "Storage write failed: %s", exc, extra={"slot": key, "op": "save"}
            )
            return False
        return True

    def delete(self, key: str) -> bool:
        try:
            self._backend.remove_item(key)
        except StorageUnavailableError as exc:
            logger.warning(
                "Storage delete failed: %s", exc, extra={"slot": key, "op": "delete"}
            )
            return False
        return True
