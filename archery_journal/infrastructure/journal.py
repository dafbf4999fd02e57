"""Journal facade wiring for the configured storage backend."""

from __future__ import annotations

from pathlib import Path

from dotenv import load_dotenv

from archery_journal.application.ports.journal import Journal
from archery_journal.application.ports.storage import KeyValueStore
from archery_journal.infrastructure.repositories import (
    InMemorySessionRepository,
    StoredParticipantRepository,
)
from archery_journal.infrastructure.storage import (
    PersistentStore,
    StorageSettings,
    create_store,
)
from i18n import DEFAULT_LANGUAGE
from utils.logger import get_logger

logger = get_logger(__name__)


class LocalJournal(Journal):
    """Roster and session log sharing one key-value store."""

    def __init__(
        self,
        *,
        participants: StoredParticipantRepository,
        sessions: InMemorySessionRepository,
        store: PersistentStore,
        language: str = DEFAULT_LANGUAGE,
    ) -> None:
        self._participants = participants
        self._sessions = sessions
        self._store = store
        self._language = language

    @property
    def participants(self) -> StoredParticipantRepository:
        return self._participants

    @property
    def sessions(self) -> InMemorySessionRepository:
        return self._sessions

    @property
    def store(self) -> PersistentStore:
        return self._store

    @property
    def language(self) -> str:
        return self._language


def create_journal(
    settings: StorageSettings | None = None,
    *,
    backend: KeyValueStore | None = None,
) -> LocalJournal:
    """Build a journal over ``backend`` or the backend ``settings`` selects."""

    settings = settings or StorageSettings()
    store = PersistentStore(backend if backend is not None else create_store(settings))
    participants = StoredParticipantRepository(store)
    sessions = InMemorySessionRepository(store if settings.persist_sessions else None)
    roster = participants.load_all()
    logger.info(
        "Journal ready: backend=%s, participants=%d, persistent sessions=%s",
        settings.backend.value,
        len(roster),
        settings.persist_sessions,
    )
    return LocalJournal(
        participants=participants,
        sessions=sessions,
        store=store,
        language=settings.language,
    )


def create_journal_from_env(dotenv_path: Path | str | None = None) -> LocalJournal:
    """Load ``.env`` (if any) and build the journal from ``JOURNAL_*`` variables."""

    load_dotenv(dotenv_path)
    return create_journal(StorageSettings.from_env())
