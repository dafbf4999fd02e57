"""Editor state for creating sessions.

The presentation layer owns one :class:`SessionForm` per editor and feeds it
user input; the form turns that into a :class:`SessionDraft` for the
repository. Keeping the state in an explicit object makes the auto-selected
scoring mode and the participant picker testable without a UI.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from archery_journal.application.ports.repositories import SessionRepository
from archery_journal.domain.models import (
    Environment,
    ScoringMode,
    Session,
    SessionDraft,
    SessionParticipant,
    SessionRejection,
    TargetZone,
)
from archery_journal.domain.scoring import (
    DEFAULT_ARROWS_PER_SET,
    DEFAULT_DISTANCE,
    DEFAULT_SETS_COUNT,
    ScoringModeSelector,
)
from utils import ParseInputError, parse_number


class SessionForm:
    """Mutable state of the session editor."""

    def __init__(self, *, today: Optional[date] = None) -> None:
        self.date: date | str = today or date.today()
        self.title = ""
        self.notes = ""
        self.distance: float | str = DEFAULT_DISTANCE
        self.environment: Environment | str = Environment.INDOOR
        self.sets_count: float | int | str = DEFAULT_SETS_COUNT
        self.arrows_per_set: float | int | str = DEFAULT_ARROWS_PER_SET
        self._mode = ScoringModeSelector(DEFAULT_DISTANCE)
        self._selected: dict[str, SessionParticipant] = {}

    @property
    def scoring_mode(self) -> ScoringMode:
        return self._mode.mode

    @property
    def mode_touched(self) -> bool:
        return self._mode.touched

    def set_distance(self, value: float | str) -> ScoringMode:
        """Update distance; returns the scoring mode now shown in the editor."""

        self.distance = value
        try:
            numeric = parse_number(value)
        except ParseInputError:
            numeric = 0.0
        return self._mode.set_distance(numeric)

    def choose_mode(self, mode: ScoringMode | str) -> ScoringMode:
        return self._mode.choose(mode)

    @property
    def participants(self) -> tuple[SessionParticipant, ...]:
        return tuple(self._selected.values())

    def is_selected(self, athlete_id: str) -> bool:
        return athlete_id in self._selected

    def target_for(self, athlete_id: str) -> TargetZone:
        selected = self._selected.get(athlete_id)
        return selected.target if selected else TargetZone.HEAD

    def toggle(self, athlete_id: str) -> bool:
        """Select or deselect an athlete; new selections aim at the head."""

        if athlete_id in self._selected:
            del self._selected[athlete_id]
            return False
        self._selected[athlete_id] = SessionParticipant(athlete_id, TargetZone.HEAD)
        return True

    def set_target(self, athlete_id: str, target: TargetZone | str) -> None:
        self._selected[athlete_id] = SessionParticipant(athlete_id, TargetZone(target))

    def to_draft(self) -> SessionDraft:
        return SessionDraft(
            date=self.date,
            title=self.title,
            notes=self.notes,
            distance=self.distance,
            environment=self.environment,
            sets_count=self.sets_count,
            arrows_per_set=self.arrows_per_set,
            scoring_mode=self._mode.override,
            participants=self.participants,
        )

    def reset_after_submit(self) -> None:
        """Clear per-session fields; date, format and the chosen mode stay."""

        self.title = ""
        self.notes = ""
        self._selected.clear()

    def submit(self, repository: SessionRepository) -> Session | SessionRejection:
        result = repository.add(self.to_draft())
        if isinstance(result, Session):
            self.reset_after_submit()
        return result
