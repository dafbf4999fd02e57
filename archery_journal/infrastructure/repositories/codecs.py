"""JSON row codecs for the persisted storage slots.

Slot layouts are shared with other consumers of the same store, so field
names stay camelCase and timestamps use the ``2024-06-01T08:00:00.000Z``
form.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Callable, Iterable, Mapping, Optional, TypeVar

from archery_journal.domain.models import (
    Environment,
    Participant,
    ScoringMode,
    Session,
    SessionParticipant,
    TargetZone,
)
from archery_journal.domain.scoring import DEFAULT_DISTANCE
from utils import (
    ParseInputError,
    clean_text,
    format_timestamp,
    parse_count,
    parse_date,
    parse_number,
    parse_optional_date,
    parse_timestamp,
)

ATHLETES_V1_KEY = "archery.athletes.v1"
ATHLETES_V2_KEY = "archery.athletes.v2"
SESSIONS_V1_KEY = "archery.sessions.v1"

T = TypeVar("T")
Row = Mapping[str, Any]
RowDecoder = Callable[[Row], Optional[T]]


def split_legacy_name(name: str) -> tuple[str, str]:
    """Split a v1 ``name`` into first name and the rest.

    >>> split_legacy_name("Ana Maria  Lopez")
    ('Ana', 'Maria Lopez')
    >>> split_legacy_name("Pasha")
    ('Pasha', '')
    """

    tokens = name.split()
    if not tokens:
        return "", ""
    return tokens[0], " ".join(tokens[1:])


def _text(row: Row, key: str) -> Optional[str]:
    value = row.get(key)
    if not isinstance(value, str):
        return None
    return value.strip()


def _identifier(row: Row, id_factory: Callable[[], str]) -> str:
    value = row.get("id")
    if isinstance(value, (str, int)) and not isinstance(value, bool) and str(value).strip():
        return str(value).strip()
    return id_factory()


def encode_participant_v2(participant: Participant) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": participant.id,
        "firstName": participant.first_name,
        "lastName": participant.last_name,
        "createdAt": format_timestamp(participant.created_at),
    }
    if participant.birth_date is not None:
        row["birthDate"] = participant.birth_date.isoformat()
    return row


def encode_participant_v1(participant: Participant) -> dict[str, Any]:
    return {
        "id": participant.id,
        "name": participant.full_name,
        "createdAt": format_timestamp(participant.created_at),
    }


def decode_participant_v2(
    row: Row, *, now: datetime, id_factory: Callable[[], str]
) -> Optional[Participant]:
    first_name = _text(row, "firstName")
    last_name = _text(row, "lastName")
    if not first_name or last_name is None:
        return None
    return Participant(
        id=_identifier(row, id_factory),
        first_name=first_name,
        last_name=last_name,
        birth_date=parse_optional_date(row.get("birthDate")),
        created_at=parse_timestamp(row.get("createdAt")) or now,
    )


def decode_participant_v1(
    row: Row, *, now: datetime, id_factory: Callable[[], str]
) -> Optional[Participant]:
    name = _text(row, "name")
    if not name:
        return None
    first_name, last_name = split_legacy_name(name)
    return Participant(
        id=_identifier(row, id_factory),
        first_name=first_name,
        last_name=last_name,
        created_at=parse_timestamp(row.get("createdAt")) or now,
    )


def encode_session(session: Session) -> dict[str, Any]:
    row: dict[str, Any] = {
        "id": session.id,
        "date": session.date.isoformat(),
        "distance": session.distance,
        "environment": session.environment.value,
        "setsCount": session.sets_count,
        "arrowsPerSet": session.arrows_per_set,
        "scoringMode": session.scoring_mode.value,
        "participants": [
            {"athleteId": item.athlete_id, "target": item.target.value}
            for item in session.participants
        ],
        "createdAt": format_timestamp(session.created_at),
    }
    if session.title:
        row["title"] = session.title
    if session.notes:
        row["notes"] = session.notes
    return row


def _decode_session_participants(raw: Any) -> tuple[SessionParticipant, ...]:
    if not isinstance(raw, list):
        return ()
    by_athlete: dict[str, SessionParticipant] = {}
    for item in raw:
        if not isinstance(item, Mapping):
            continue
        athlete_id = _text(item, "athleteId")
        if not athlete_id:
            continue
        try:
            target = TargetZone(item.get("target", TargetZone.HEAD.value))
        except ValueError:
            target = TargetZone.HEAD
        by_athlete[athlete_id] = SessionParticipant(athlete_id=athlete_id, target=target)
    return tuple(by_athlete.values())


def decode_session(
    row: Row, *, now: datetime, id_factory: Callable[[], str]
) -> Optional[Session]:
    try:
        session_date = parse_date(row.get("date"))
        environment = Environment(row.get("environment", Environment.INDOOR.value))
        scoring_mode = ScoringMode(row.get("scoringMode", ScoringMode.NORMAL.value))
    except (ParseInputError, ValueError):
        return None
    try:
        distance = parse_number(row.get("distance"))
    except ParseInputError:
        distance = DEFAULT_DISTANCE
    return Session(
        id=_identifier(row, id_factory),
        date=session_date,
        title=clean_text(row.get("title")),
        notes=clean_text(row.get("notes")),
        distance=distance,
        environment=environment,
        sets_count=parse_count(row.get("setsCount")),
        arrows_per_set=parse_count(row.get("arrowsPerSet")),
        scoring_mode=scoring_mode,
        participants=_decode_session_participants(row.get("participants")),
        created_at=parse_timestamp(row.get("createdAt")) or now,
    )


def decode_rows(
    payload: Any, decoder: RowDecoder[T]
) -> tuple[Optional[list[T]], int]:
    """Decode a stored list; ``(None, 0)`` when the payload is not a list.

    The second element counts rows that were skipped as malformed.
    """

    if not isinstance(payload, list):
        return None, 0
    decoded: list[T] = []
    skipped = 0
    for row in payload:
        item = decoder(row) if isinstance(row, Mapping) else None
        if item is None:
            skipped += 1
            continue
        decoded.append(item)
    return decoded, skipped


def encode_rows(items: Iterable[T], encoder: Callable[[T], dict[str, Any]]) -> list[dict[str, Any]]:
    return [encoder(item) for item in items]
