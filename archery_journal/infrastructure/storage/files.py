"""Key-value store keeping one JSON document per slot inside a directory."""

from __future__ import annotations

import re
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Iterable, Optional

from archery_journal.application.ports.storage import (
    KeyValueStore,
    StorageUnavailableError,
)

_SLOT_SUFFIX = ".json"
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _slot_filename(key: str) -> str:
    cleaned = _UNSAFE_CHARS.sub("_", key.strip())
    if not cleaned or cleaned.strip(".") == "":
        raise ValueError(f"Invalid storage key: {key!r}")
    return f"{cleaned}{_SLOT_SUFFIX}"


class JsonFileKeyValueStore(KeyValueStore):
    """Slots live in ``<data_dir>/<key>.json``; writes replace files atomically."""

    def __init__(self, data_dir: Path | str) -> None:
        self._data_dir = Path(data_dir)

    @property
    def data_dir(self) -> Path:
        return self._data_dir

    def get_item(self, key: str) -> Optional[str]:
        path = self._data_dir / _slot_filename(key)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageUnavailableError(f"Unable to read {path}.") from exc

    def set_item(self, key: str, value: str) -> None:
        path = self._data_dir / _slot_filename(key)
        temp_path: Optional[Path] = None
        try:
            payload = value.encode("utf-8")
            self._data_dir.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                "wb", dir=self._data_dir, delete=False, suffix=".tmp"
            ) as tmp:
                temp_path = Path(tmp.name)
                tmp.write(payload)
            temp_path.replace(path)
        except (OSError, UnicodeError) as exc:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)
            raise StorageUnavailableError(f"Unable to write {path}.") from exc

    def remove_item(self, key: str) -> None:
        path = self._data_dir / _slot_filename(key)
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            raise StorageUnavailableError(f"Unable to remove {path}.") from exc

    def keys(self) -> Iterable[str]:
        if not self._data_dir.is_dir():
            return ()
        return tuple(
            sorted(path.stem for path in self._data_dir.glob(f"*{_SLOT_SUFFIX}"))
        )
