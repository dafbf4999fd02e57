from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from archery_journal.infrastructure.repositories import (
    InMemorySessionRepository,
    StoredParticipantRepository,
)
from archery_journal.infrastructure.storage import PersistentStore
from tests.fakes import KeyValueStoreFake, SequentialIds, TickingClock


@pytest.fixture
def backend() -> KeyValueStoreFake:
    """Return an empty recording key-value store."""

    return KeyValueStoreFake()


@pytest.fixture
def store(backend: KeyValueStoreFake) -> PersistentStore:
    return PersistentStore(backend)


@pytest.fixture
def clock() -> TickingClock:
    return TickingClock()


@pytest.fixture
def participant_repo(store: PersistentStore, clock: TickingClock) -> StoredParticipantRepository:
    """Return roster repository with deterministic ids and timestamps."""

    return StoredParticipantRepository(
        store, id_factory=SequentialIds("athlete"), clock=clock
    )


@pytest.fixture
def session_repo(clock: TickingClock) -> InMemorySessionRepository:
    """Return in-memory session log with deterministic ids and timestamps."""

    return InMemorySessionRepository(id_factory=SequentialIds("session"), clock=clock)
