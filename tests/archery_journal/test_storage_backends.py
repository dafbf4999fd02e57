"""Key-value backends and the JSON slot adapter."""

from __future__ import annotations

from pathlib import Path

import pytest

from archery_journal.application.ports.storage import (
    StorageQuotaExceededError,
    StorageUnavailableError,
)
from archery_journal.infrastructure.repositories import StoredParticipantRepository
from archery_journal.infrastructure.storage import (
    JsonFileKeyValueStore,
    MemoryKeyValueStore,
    PersistentStore,
    SqliteKeyValueStore,
    StorageBackend,
    StorageSettings,
    create_store,
)
from tests.fakes import KeyValueStoreFake


@pytest.fixture(params=["memory", "file", "sqlite"])
def kv_backend(request: pytest.FixtureRequest, tmp_path: Path):
    if request.param == "memory":
        return MemoryKeyValueStore()
    if request.param == "file":
        return JsonFileKeyValueStore(tmp_path / "slots")
    return SqliteKeyValueStore(tmp_path / "db" / "journal.db")


def test_backend_contract(kv_backend) -> None:
    assert kv_backend.get_item("archery.athletes.v2") is None

    kv_backend.set_item("archery.athletes.v2", "[1]")
    kv_backend.set_item("archery.athletes.v2", '["Ёлка"]')
    kv_backend.set_item("archery.athletes.v1", "[]")

    assert kv_backend.get_item("archery.athletes.v2") == '["Ёлка"]'
    assert sorted(kv_backend.keys()) == ["archery.athletes.v1", "archery.athletes.v2"]

    kv_backend.remove_item("archery.athletes.v2")
    kv_backend.remove_item("archery.athletes.v2")
    assert kv_backend.get_item("archery.athletes.v2") is None


def test_file_store_writes_one_file_per_slot(tmp_path: Path) -> None:
    backend = JsonFileKeyValueStore(tmp_path)

    backend.set_item("archery.sessions.v1", "[]")

    assert (tmp_path / "archery.sessions.v1.json").read_text(encoding="utf-8") == "[]"
    assert list(tmp_path.glob("*.tmp")) == []


def test_file_store_reports_unwritable_directory(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    backend = JsonFileKeyValueStore(blocker / "nested")

    with pytest.raises(StorageUnavailableError):
        backend.set_item("archery.athletes.v2", "[]")


def test_sqlite_store_reports_unusable_path(tmp_path: Path) -> None:
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    backend = SqliteKeyValueStore(blocker / "journal.db")

    with pytest.raises(StorageUnavailableError):
        backend.get_item("archery.athletes.v2")


def test_memory_quota_counts_existing_slots() -> None:
    backend = MemoryKeyValueStore({"a": "12345"}, quota_bytes=10)

    backend.set_item("a", "123456789")
    with pytest.raises(StorageQuotaExceededError):
        backend.set_item("b", "1")

    assert backend.get_item("b") is None


def test_adapter_round_trips_json(backend: KeyValueStoreFake) -> None:
    store = PersistentStore(backend)

    assert store.save("slot", {"name": "Ана", "items": [1, 2]}) is True
    assert backend.items["slot"] == '{"name": "Ана", "items": [1, 2]}'
    assert store.load("slot") == {"name": "Ана", "items": [1, 2]}


@pytest.mark.parametrize("raw", [None, "", "   ", "{broken"])
def test_adapter_returns_default_for_missing_or_malformed(
    backend: KeyValueStoreFake, raw: str | None
) -> None:
    if raw is not None:
        backend.items["slot"] = raw

    assert PersistentStore(backend).load("slot", default=[]) == []


def test_adapter_swallows_backend_failures(backend: KeyValueStoreFake) -> None:
    store = PersistentStore(backend)
    backend.items["slot"] = "[1]"
    backend.fail_reads = True
    backend.fail_writes = True

    assert store.load("slot", default="fallback") == "fallback"
    assert store.save("slot", [2]) is False
    assert store.delete("slot") is False
    assert backend.items["slot"] == "[1]"


def test_adapter_rejects_unserialisable_values(backend: KeyValueStoreFake) -> None:
    assert PersistentStore(backend).save("slot", {"when": object()}) is False
    assert backend.writes == []


def test_create_store_follows_settings(tmp_path: Path) -> None:
    memory = create_store(StorageSettings())
    files = create_store(StorageSettings(backend=StorageBackend.FILE, data_dir=tmp_path))
    sqlite = create_store(
        StorageSettings(backend=StorageBackend.SQLITE, db_path=tmp_path / "j.db")
    )

    assert isinstance(memory, MemoryKeyValueStore)
    assert isinstance(files, JsonFileKeyValueStore)
    assert files.data_dir == tmp_path
    assert isinstance(sqlite, SqliteKeyValueStore)


@pytest.mark.parametrize("kind", ["file", "sqlite"])
def test_roster_survives_new_backend_instance(tmp_path: Path, kind: str) -> None:
    def open_backend():
        if kind == "file":
            return JsonFileKeyValueStore(tmp_path)
        return SqliteKeyValueStore(tmp_path / "journal.db")

    first = StoredParticipantRepository(PersistentStore(open_backend()))
    created = first.add("Lee", "Chan", "2011-04-02")

    reopened = StoredParticipantRepository(PersistentStore(open_backend()))

    assert reopened.load_all() == (created,)


@pytest.mark.parametrize("kind", ["file", "sqlite", "quota"])
def test_unencodable_text_never_escapes_repository(tmp_path: Path, kind: str) -> None:
    if kind == "file":
        backend = JsonFileKeyValueStore(tmp_path)
    elif kind == "sqlite":
        backend = SqliteKeyValueStore(tmp_path / "journal.db")
    else:
        backend = MemoryKeyValueStore(quota_bytes=1_000_000)
    repo = StoredParticipantRepository(PersistentStore(backend))

    participant = repo.add("Ana\ud800", "Lopez")

    assert participant is not None
    assert repo.list() == (participant,)
    assert backend.get_item("archery.athletes.v2") is None
    assert list(tmp_path.glob("*.tmp")) == []


def test_unencodable_value_is_reported_by_backend(tmp_path: Path) -> None:
    with pytest.raises(StorageUnavailableError):
        JsonFileKeyValueStore(tmp_path).set_item("slot", '"\ud800"')
    with pytest.raises(StorageUnavailableError):
        SqliteKeyValueStore(tmp_path / "journal.db").set_item("slot", '"\ud800"')
