"""Key-value storage contract mirrored on browser local storage."""

from __future__ import annotations

from typing import Iterable, Optional, Protocol


class StorageUnavailableError(RuntimeError):
    """Backend cannot be read or written (missing, locked, read-only)."""


class StorageQuotaExceededError(StorageUnavailableError):
    """Write refused because the backend is out of space."""


class KeyValueStore(Protocol):
    """Named string slots; implementations raise :class:`StorageUnavailableError`."""

    def get_item(self, key: str) -> Optional[str]:
        """Return raw slot content or ``None`` when the slot is empty."""

    def set_item(self, key: str, value: str) -> None:
        """Replace slot content."""

    def remove_item(self, key: str) -> None:
        """Drop the slot if present."""

    def keys(self) -> Iterable[str]:
        """Return the names of populated slots."""
