"""Derived views over the roster and the session log.

Everything here is a pure function of a repository snapshot plus explicit
query parameters, so screens can recompute projections on every input change
and tests can exercise them without any rendering harness.
"""

from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Optional, Sequence

from archery_journal.domain.models import (
    Environment,
    Participant,
    ScoringMode,
    Session,
    SessionParticipant,
    SessionRejection,
    TargetZone,
    compute_age,
)
from i18n import t
from utils import fmt_distance

_MODE_KEYS = {
    ScoringMode.NORMAL: "normal",
    ScoringMode.HITS_ONLY: "hits_only",
    ScoringMode.CENTER_ONLY: "center_only",
}


class ParticipantSort(str, Enum):
    """Sort keys offered by the roster table."""

    NAME = "name"
    AGE = "age"


@dataclass(frozen=True, slots=True)
class ParticipantQuery:
    """Transient roster inputs: search box, age filter and sort selector."""

    search: str = ""
    max_age: Optional[int] = None
    sort: ParticipantSort = ParticipantSort.NAME
    descending: bool = False


def collation_key(text: str) -> tuple[str, str]:
    """Return a locale-insensitive sort key: accents folded, case folded.

    The second element keeps accented variants in a deterministic order.

    >>> sorted(["Zoe", "Émile", "adam"], key=collation_key)
    ['adam', 'Émile', 'Zoe']
    """

    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(char for char in decomposed if not unicodedata.combining(char))
    return base.casefold(), text.casefold()


def _matches_search(participant: Participant, needle: str) -> bool:
    return needle in participant.full_name.casefold()


def project_participants(
    participants: Iterable[Participant],
    query: ParticipantQuery = ParticipantQuery(),
    *,
    today: Optional[date] = None,
) -> tuple[Participant, ...]:
    """Filter and sort the roster for display.

    ``query.max_age`` keeps only participants strictly younger than the given
    age; people without a birth date are dropped while it is active. Sorting
    by age places unknown ages last in both directions.
    """

    reference = today or date.today()
    needle = query.search.strip().casefold()

    selected: list[Participant] = []
    for participant in participants:
        if needle and not _matches_search(participant, needle):
            continue
        if query.max_age is not None:
            age = compute_age(participant.birth_date, reference)
            if age is None or age >= query.max_age:
                continue
        selected.append(participant)

    by_name = sorted(
        selected,
        key=lambda item: collation_key(item.full_name),
        reverse=query.descending and query.sort is ParticipantSort.NAME,
    )
    if query.sort is ParticipantSort.NAME:
        return tuple(by_name)

    known = [item for item in by_name if item.birth_date is not None]
    unknown = [item for item in by_name if item.birth_date is None]
    known.sort(
        key=lambda item: compute_age(item.birth_date, reference),
        reverse=query.descending,
    )
    return (*known, *unknown)


def sort_sessions(sessions: Iterable[Session]) -> tuple[Session, ...]:
    """Newest session date first; same-day sessions by creation time, newest first."""

    return tuple(
        sorted(sessions, key=lambda item: (item.date, item.created_at), reverse=True)
    )


def title_key(title: Optional[str]) -> str:
    """Normalise a title for uniqueness checks."""

    return (title or "").strip().casefold()


def existing_titles(sessions: Iterable[Session]) -> frozenset[str]:
    return frozenset(key for key in (title_key(item.title) for item in sessions) if key)


def is_title_taken(sessions: Iterable[Session], title: Optional[str]) -> bool:
    """Return ``True`` when a non-blank ``title`` collides with an existing one."""

    key = title_key(title)
    if not key:
        return False
    return key in existing_titles(sessions)


def needs_participants(participants: Sequence[SessionParticipant]) -> bool:
    return len(participants) == 0


def environment_label(environment: Environment, *, lang: Optional[str] = None) -> str:
    return t(f"sessions.environment.{Environment(environment).value}", lang=lang)


def scoring_badge(mode: ScoringMode, *, lang: Optional[str] = None) -> str:
    """Short label for the scoring-mode badge (``normal``/``hits-only``/``center-only``)."""

    return t(f"sessions.badge.{_MODE_KEYS[ScoringMode(mode)]}", lang=lang)


def scoring_mode_label(mode: ScoringMode, *, lang: Optional[str] = None) -> str:
    return t(f"sessions.mode.{_MODE_KEYS[ScoringMode(mode)]}", lang=lang)


def target_label(target: TargetZone, *, lang: Optional[str] = None) -> str:
    return t(f"sessions.target.{TargetZone(target).value}", lang=lang)


def session_display_name(session: Session, *, lang: Optional[str] = None) -> str:
    """Session title when set, otherwise ``"<date> · <distance>m · <environment>"``."""

    title = (session.title or "").strip()
    if title:
        return title
    return session_location_label(session, lang=lang, with_date=True)


def session_location_label(
    session: Session, *, lang: Optional[str] = None, with_date: bool = False
) -> str:
    parts = [
        f"{fmt_distance(session.distance)}m",
        environment_label(session.environment, lang=lang),
    ]
    if with_date:
        parts.insert(0, session.date.isoformat())
    return " · ".join(parts)


def session_format(session: Session) -> str:
    """Sets-by-arrows summary, e.g. ``"7 × 5"``."""

    return f"{session.sets_count} × {session.arrows_per_set}"


def session_count_label(sessions: Sequence[Session], *, lang: Optional[str] = None) -> str:
    return t("sessions.count", lang=lang, count=len(sessions))


def age_filter_label(max_age: int, *, lang: Optional[str] = None) -> str:
    return t("participants.age_under", lang=lang, age=max_age)


def rejection_message(rejection: SessionRejection, *, lang: Optional[str] = None) -> str:
    """Localised text for a refused session draft."""

    return t(SessionRejection(rejection).value, lang=lang)


__all__ = [
    "ParticipantQuery",
    "ParticipantSort",
    "age_filter_label",
    "collation_key",
    "environment_label",
    "existing_titles",
    "is_title_taken",
    "needs_participants",
    "project_participants",
    "rejection_message",
    "scoring_badge",
    "scoring_mode_label",
    "session_count_label",
    "session_display_name",
    "session_format",
    "session_location_label",
    "sort_sessions",
    "target_label",
    "title_key",
]
