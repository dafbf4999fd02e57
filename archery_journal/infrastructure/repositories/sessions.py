"""Session log kept in memory, optionally mirrored to a storage slot."""

from __future__ import annotations

from datetime import date, datetime
from functools import partial
from typing import Callable, Iterable, Mapping, Optional, Union

from archery_journal.application.ports.repositories import SessionRepository
from archery_journal.domain.models import (
    Environment,
    ScoringMode,
    Session,
    SessionDraft,
    SessionParticipant,
    SessionRejection,
)
from archery_journal.domain.scoring import DEFAULT_DISTANCE, default_mode_for_distance
from archery_journal.domain.views import is_title_taken, needs_participants
from archery_journal.infrastructure.storage.adapter import PersistentStore
from utils import ParseInputError, clean_text, parse_count, parse_number, parse_optional_date
from utils.logger import get_logger

from .codecs import SESSIONS_V1_KEY, decode_rows, decode_session, encode_rows, encode_session
from .participants import new_identifier, utc_now

logger = get_logger(__name__)

ParticipantsInput = Union[
    Iterable[SessionParticipant], Mapping[str, SessionParticipant]
]


def normalise_participants(raw: ParticipantsInput) -> tuple[SessionParticipant, ...]:
    """Collapse a selection to one entry per athlete, last assignment winning."""

    items = raw.values() if isinstance(raw, Mapping) else raw
    by_athlete: dict[str, SessionParticipant] = {}
    for item in items:
        by_athlete[item.athlete_id] = item
    return tuple(by_athlete.values())


def _environment(raw: Environment | str) -> Environment:
    try:
        return Environment(raw)
    except ValueError:
        logger.warning("Unknown environment, using indoor", extra={"op": "add"})
        return Environment.INDOOR


def _scoring_mode(raw: Optional[ScoringMode | str], distance: float) -> ScoringMode:
    if raw is None:
        return default_mode_for_distance(distance)
    try:
        return ScoringMode(raw)
    except ValueError:
        logger.warning("Unknown scoring mode, using distance default", extra={"op": "add"})
        return default_mode_for_distance(distance)


def _distance(raw: float | int | str) -> float:
    try:
        return parse_number(raw)
    except ParseInputError:
        return DEFAULT_DISTANCE


class InMemorySessionRepository(SessionRepository):
    """Sessions recorded during the current run, newest first.

    Without a store the log lives only as long as the repository. With one,
    it is read from and rewritten to ``archery.sessions.v1`` the same way the
    roster uses its athlete slots.
    """

    def __init__(
        self,
        store: Optional[PersistentStore] = None,
        *,
        id_factory: Callable[[], str] = new_identifier,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._id_factory = id_factory
        self._clock = clock
        self._items: list[Session] = []
        self._issued_ids: set[str] = set()
        self._loaded = store is None

    @property
    def persistent(self) -> bool:
        return self._store is not None

    def list(self) -> tuple[Session, ...]:
        self._ensure_loaded()
        return tuple(self._items)

    def get(self, session_id: str) -> Optional[Session]:
        self._ensure_loaded()
        return next((item for item in self._items if item.id == session_id), None)

    def validate(self, draft: SessionDraft) -> tuple[SessionRejection, ...]:
        self._ensure_loaded()
        issues: list[SessionRejection] = []
        if needs_participants(normalise_participants(draft.participants)):
            issues.append(SessionRejection.NEED_PARTICIPANTS)
        if is_title_taken(self._items, draft.title):
            issues.append(SessionRejection.TITLE_TAKEN)
        if parse_optional_date(draft.date) is None:
            issues.append(SessionRejection.INVALID_DATE)
        return tuple(issues)

    def add(self, draft: SessionDraft) -> Session | SessionRejection:
        issues = self.validate(draft)
        if issues:
            logger.info("Session draft rejected: %s", issues[0].name, extra={"op": "add"})
            return issues[0]

        session_date = parse_optional_date(draft.date)
        session = self._build(draft, session_date)
        self._items.insert(0, session)
        self._persist()
        logger.info("Session added", extra={"entity_id": session.id, "op": "add"})
        return session

    def remove(self, session_id: str) -> bool:
        self._ensure_loaded()
        remaining = [item for item in self._items if item.id != session_id]
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        self._persist()
        logger.info("Session removed", extra={"entity_id": session_id, "op": "remove"})
        return True

    def _build(self, draft: SessionDraft, session_date: date) -> Session:
        distance = _distance(draft.distance)
        return Session(
            id=self._fresh_id(),
            date=session_date,
            title=clean_text(draft.title),
            notes=clean_text(draft.notes),
            distance=distance,
            environment=_environment(draft.environment),
            sets_count=parse_count(draft.sets_count),
            arrows_per_set=parse_count(draft.arrows_per_set),
            scoring_mode=_scoring_mode(draft.scoring_mode, distance),
            participants=normalise_participants(draft.participants),
            created_at=self._clock(),
        )

    def _fresh_id(self) -> str:
        candidate = self._id_factory()
        while candidate in self._issued_ids:
            candidate = self._id_factory()
        self._issued_ids.add(candidate)
        return candidate

    def _ensure_loaded(self) -> None:
        if self._loaded or self._store is None:
            return
        decoded, skipped = decode_rows(
            self._store.load(SESSIONS_V1_KEY),
            partial(decode_session, now=self._clock(), id_factory=self._id_factory),
        )
        self._items = decoded or []
        self._issued_ids.update(item.id for item in self._items)
        if skipped:
            logger.warning(
                "Skipped %d malformed session rows",
                skipped,
                extra={"slot": SESSIONS_V1_KEY, "op": "load"},
            )
        self._loaded = True

    def _persist(self) -> bool:
        if self._store is None:
            return True
        return self._store.save(SESSIONS_V1_KEY, encode_rows(self._items, encode_session))
