"""Participant roster persisted in the current and legacy athlete slots."""

from __future__ import annotations

from datetime import date, datetime, timezone
from functools import partial
from typing import Callable, Optional, Sequence
from uuid import uuid4

from archery_journal.application.ports.repositories import ParticipantRepository
from archery_journal.domain.models import Participant
from archery_journal.infrastructure.storage.adapter import PersistentStore
from utils import parse_optional_date
from utils.logger import get_logger

from .codecs import (
    ATHLETES_V1_KEY,
    ATHLETES_V2_KEY,
    decode_participant_v1,
    decode_participant_v2,
    decode_rows,
    encode_participant_v1,
    encode_participant_v2,
    encode_rows,
)

logger = get_logger(__name__)


def new_identifier() -> str:
    return uuid4().hex


def utc_now() -> datetime:
    """Current UTC time truncated to the millisecond precision stored on disk."""

    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


class StoredParticipantRepository(ParticipantRepository):
    """In-memory roster mirrored to both athlete slots after every mutation.

    ``archery.athletes.v2`` is canonical. ``archery.athletes.v1`` keeps the
    single ``name`` layout for consumers that have not moved to v2; it is only
    read when v2 is absent or unreadable.
    """

    def __init__(
        self,
        store: PersistentStore,
        *,
        id_factory: Callable[[], str] = new_identifier,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._store = store
        self._id_factory = id_factory
        self._clock = clock
        self._items: list[Participant] = []
        self._issued_ids: set[str] = set()
        self._loaded = False

    def load_all(self) -> tuple[Participant, ...]:
        now = self._clock()
        current, skipped = decode_rows(
            self._store.load(ATHLETES_V2_KEY),
            partial(decode_participant_v2, now=now, id_factory=self._id_factory),
        )
        if current is not None:
            self._items = self._deduplicate(current)
            if skipped:
                logger.warning(
                    "Skipped %d malformed participant rows",
                    skipped,
                    extra={"slot": ATHLETES_V2_KEY, "op": "load"},
                )
        else:
            self._items = self._load_legacy(now)
        self._issued_ids.update(item.id for item in self._items)
        self._loaded = True
        return tuple(self._items)

    def list(self) -> tuple[Participant, ...]:
        self._ensure_loaded()
        return tuple(self._items)

    def get(self, participant_id: str) -> Optional[Participant]:
        self._ensure_loaded()
        return next((item for item in self._items if item.id == participant_id), None)

    def add(
        self,
        first_name: str,
        last_name: str,
        birth_date: date | str | None = None,
    ) -> Optional[Participant]:
        first = (first_name or "").strip()
        last = (last_name or "").strip()
        if not first or not last:
            return None

        self._ensure_loaded()
        parsed_birth_date = parse_optional_date(birth_date)
        if parsed_birth_date is None and birth_date not in (None, ""):
            logger.info(
                "Ignoring unparseable birth date", extra={"op": "add"}
            )
        participant = Participant(
            id=self._fresh_id(),
            first_name=first,
            last_name=last,
            birth_date=parsed_birth_date,
            created_at=self._clock(),
        )
        self._items.insert(0, participant)
        self._persist()
        logger.info("Participant added", extra={"entity_id": participant.id, "op": "add"})
        return participant

    def remove(self, participant_id: str) -> bool:
        self._ensure_loaded()
        remaining = [item for item in self._items if item.id != participant_id]
        if len(remaining) == len(self._items):
            return False
        self._items = remaining
        self._persist()
        logger.info("Participant removed", extra={"entity_id": participant_id, "op": "remove"})
        return True

    def _load_legacy(self, now: datetime) -> list[Participant]:
        legacy, skipped = decode_rows(
            self._store.load(ATHLETES_V1_KEY),
            partial(decode_participant_v1, now=now, id_factory=self._id_factory),
        )
        if legacy is None:
            return []
        migrated = self._deduplicate(legacy)
        logger.info(
            "Migrated %d participants from legacy schema (%d rows skipped)",
            len(migrated),
            skipped,
            extra={"slot": ATHLETES_V1_KEY, "op": "migrate"},
        )
        self._items = migrated
        self._persist()
        return migrated

    def _deduplicate(self, items: Sequence[Participant]) -> list[Participant]:
        seen: set[str] = set()
        unique: list[Participant] = []
        for item in items:
            if item.id in seen:
                logger.warning(
                    "Dropping participant with duplicate id",
                    extra={"entity_id": item.id, "op": "load"},
                )
                continue
            seen.add(item.id)
            unique.append(item)
        return unique

    def _fresh_id(self) -> str:
        # Ids are never reused, not even after removal.
        candidate = self._id_factory()
        while candidate in self._issued_ids:
            candidate = self._id_factory()
        self._issued_ids.add(candidate)
        return candidate

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            self.load_all()

    def _persist(self) -> bool:
        """Write v2 then the v1 mirror; a failed mirror rolls v2 back."""

        previous_v2 = self._store.load(ATHLETES_V2_KEY)
        if not self._store.save(
            ATHLETES_V2_KEY, encode_rows(self._items, encode_participant_v2)
        ):
            return False
        if self._store.save(
            ATHLETES_V1_KEY, encode_rows(self._items, encode_participant_v1)
        ):
            return True

        if previous_v2 is None:
            restored = self._store.delete(ATHLETES_V2_KEY)
        else:
            restored = self._store.save(ATHLETES_V2_KEY, previous_v2)
        logger.warning(
            "Legacy mirror write failed; %s",
            "previous roster slot restored" if restored else "roster slots out of sync",
            extra={"slot": ATHLETES_V1_KEY, "op": "save"},
        )
        return False
