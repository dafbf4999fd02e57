"""Dict-backed key-value store with an optional size quota."""

from __future__ import annotations

from typing import Iterable, Optional

from archery_journal.application.ports.storage import (
    KeyValueStore,
    StorageQuotaExceededError,
    StorageUnavailableError,
)


class MemoryKeyValueStore(KeyValueStore):
    """Process-local store; ``quota_bytes`` caps the UTF-8 size of all slots."""

    def __init__(
        self,
        initial: dict[str, str] | None = None,
        *,
        quota_bytes: int | None = None,
    ) -> None:
        self._items: dict[str, str] = dict(initial or {})
        self._quota_bytes = quota_bytes

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        if self._quota_bytes is not None:
            try:
                projected = self._size_without(key) + _slot_size(key, value)
            except UnicodeError as exc:
                raise StorageUnavailableError(f"Slot '{key}' is not valid UTF-8.") from exc
            if projected > self._quota_bytes:
                raise StorageQuotaExceededError(
                    f"Writing '{key}' needs {projected} bytes, quota is {self._quota_bytes}."
                )
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> Iterable[str]:
        return tuple(self._items)

    def _size_without(self, key: str) -> int:
        return sum(
            _slot_size(name, value) for name, value in self._items.items() if name != key
        )


def _slot_size(key: str, value: str) -> int:
    return len(key.encode("utf-8")) + len(value.encode("utf-8"))
