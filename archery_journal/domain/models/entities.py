"""Domain entities shared between repositories, views and forms."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Sequence


class Environment(str, Enum):
    """Where a session is shot."""

    INDOOR = "indoor"
    OUTDOOR = "outdoor"


class ScoringMode(str, Enum):
    """Rule set determining how hits are scored."""

    NORMAL = "normal"
    HITS_ONLY = "hitsOnly"
    CENTER_ONLY = "centerOnly"


class TargetZone(str, Enum):
    """Aim area assigned to a participant within a session."""

    HEAD = "head"
    BELLY = "belly"


def compute_age(birth_date: Optional[date], today: date) -> Optional[int]:
    """Return completed years between ``birth_date`` and ``today``.

    >>> compute_age(date(2000, 6, 15), date(2024, 6, 14))
    23
    >>> compute_age(date(2000, 6, 15), date(2024, 6, 15))
    24
    >>> compute_age(None, date(2024, 1, 1)) is None
    True
    """

    if birth_date is None:
        return None
    years = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        years -= 1
    return years


@dataclass(slots=True, frozen=True)
class Participant:
    """A person on the roster who can be assigned to sessions."""

    id: str
    first_name: str
    last_name: str
    created_at: datetime
    birth_date: Optional[date] = None

    @property
    def full_name(self) -> str:
        # Migrated single-token names have an empty last name.
        return " ".join(part for part in (self.first_name, self.last_name) if part)

    def age(self, today: Optional[date] = None) -> Optional[int]:
        return compute_age(self.birth_date, today or date.today())


@dataclass(slots=True, frozen=True)
class SessionParticipant:
    """Participation of one athlete in a session."""

    athlete_id: str
    target: TargetZone = TargetZone.HEAD


@dataclass(slots=True, frozen=True)
class Session:
    """One recorded shooting event with its configuration and roster."""

    id: str
    date: date
    distance: float
    environment: Environment
    sets_count: int
    arrows_per_set: int
    scoring_mode: ScoringMode
    participants: Sequence[SessionParticipant]
    created_at: datetime
    title: Optional[str] = None
    notes: Optional[str] = None

    @property
    def total_arrows(self) -> int:
        return self.sets_count * self.arrows_per_set


@dataclass(slots=True, frozen=True)
class SessionDraft:
    """Candidate session as submitted from the editor.

    Numeric and date fields accept raw form values; they are normalised when
    the draft is accepted. ``scoring_mode=None`` means the operator did not
    override the distance-based default.
    """

    date: date | str
    participants: Sequence[SessionParticipant] = field(default_factory=tuple)
    distance: float | int | str = 18
    environment: Environment | str = Environment.INDOOR
    sets_count: float | int | str = 7
    arrows_per_set: float | int | str = 5
    scoring_mode: Optional[ScoringMode | str] = None
    title: Optional[str] = None
    notes: Optional[str] = None


class SessionRejection(str, Enum):
    """Reasons a session draft is refused; values are translation keys."""

    NEED_PARTICIPANTS = "sessions.validation.need_participants"
    TITLE_TAKEN = "sessions.validation.title_taken"
    INVALID_DATE = "sessions.validation.invalid_date"
