"""Settings parsing and journal wiring."""

from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from archery_journal.domain.models import SessionDraft, SessionParticipant
from archery_journal.infrastructure.journal import create_journal, create_journal_from_env
from archery_journal.infrastructure.repositories import ATHLETES_V1_KEY, SESSIONS_V1_KEY
from archery_journal.infrastructure.storage import (
    JsonFileKeyValueStore,
    StorageBackend,
    StorageSettings,
)
from tests.fakes import KeyValueStoreFake

_ENV_KEYS = (
    "JOURNAL_STORAGE_BACKEND",
    "JOURNAL_DATA_DIR",
    "JOURNAL_DB_PATH",
    "JOURNAL_PERSIST_SESSIONS",
    "JOURNAL_LANGUAGE",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so values written by load_dotenv are undone on teardown.
    for key in _ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)


def test_settings_defaults() -> None:
    settings = StorageSettings.from_env({})

    assert settings.backend is StorageBackend.MEMORY
    assert settings.data_dir == Path("data")
    assert settings.db_path == Path("data") / "journal.db"
    assert settings.persist_sessions is False
    assert settings.language == "en"


def test_settings_from_environment(tmp_path: Path) -> None:
    settings = StorageSettings.from_env(
        {
            "JOURNAL_STORAGE_BACKEND": " SQLite ",
            "JOURNAL_DATA_DIR": str(tmp_path),
            "JOURNAL_PERSIST_SESSIONS": "yes",
            "JOURNAL_LANGUAGE": "TR",
        }
    )

    assert settings.backend is StorageBackend.SQLITE
    assert settings.db_path == tmp_path / "journal.db"
    assert settings.persist_sessions is True
    assert settings.language == "tr"


def test_unknown_backend_is_a_configuration_error() -> None:
    with pytest.raises(ValueError, match="JOURNAL_STORAGE_BACKEND"):
        StorageSettings.from_env({"JOURNAL_STORAGE_BACKEND": "redis"})


def test_unknown_language_falls_back_to_default() -> None:
    assert StorageSettings.from_env({"JOURNAL_LANGUAGE": "xx"}).language == "en"


def test_journal_loads_roster_on_start() -> None:
    backend = KeyValueStoreFake(
        items={ATHLETES_V1_KEY: json.dumps([{"id": "a", "name": "Lee Chan"}])}
    )

    journal = create_journal(backend=backend)

    assert [item.full_name for item in journal.participants.list()] == ["Lee Chan"]
    assert journal.sessions.persistent is False
    assert journal.language == "en"


def test_journal_persists_sessions_when_enabled() -> None:
    backend = KeyValueStoreFake()
    journal = create_journal(StorageSettings(persist_sessions=True), backend=backend)
    athlete = journal.participants.add("Lee", "Chan")

    journal.sessions.add(
        SessionDraft(date=date(2024, 5, 1), participants=(SessionParticipant(athlete.id),))
    )

    assert journal.sessions.persistent is True
    assert len(json.loads(backend.items[SESSIONS_V1_KEY])) == 1


def test_journal_from_env_uses_dotenv(tmp_path: Path) -> None:
    data_dir = tmp_path / "slots"
    env_file = tmp_path / ".env"
    env_file.write_text(
        f"JOURNAL_STORAGE_BACKEND=file\nJOURNAL_DATA_DIR={data_dir}\nJOURNAL_LANGUAGE=ru\n",
        encoding="utf-8",
    )

    journal = create_journal_from_env(env_file)
    journal.participants.add("Анна", "Смирнова")

    assert isinstance(journal.store.backend, JsonFileKeyValueStore)
    assert journal.language == "ru"
    assert (data_dir / "archery.athletes.v2.json").exists()
