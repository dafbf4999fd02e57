"""Repository contracts for the roster and the session log."""

from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from archery_journal.domain.models import (
    Participant,
    Session,
    SessionDraft,
    SessionRejection,
)


class ParticipantRepository(Protocol):
    """Roster of participants, newest first."""

    def load_all(self) -> Sequence[Participant]:
        """Reload participants from storage, migrating legacy data if needed."""

    def list(self) -> Sequence[Participant]:
        """Return the in-memory roster."""

    def get(self, participant_id: str) -> Optional[Participant]:
        """Fetch a participant by identifier."""

    def add(
        self,
        first_name: str,
        last_name: str,
        birth_date: date | str | None = None,
    ) -> Optional[Participant]:
        """Create a participant; ``None`` when a name is blank."""

    def remove(self, participant_id: str) -> bool:
        """Delete a participant; ``True`` if one was removed."""


class SessionRepository(Protocol):
    """Log of shooting sessions, newest first."""

    def list(self) -> Sequence[Session]:
        """Return recorded sessions."""

    def get(self, session_id: str) -> Optional[Session]:
        """Fetch a session by identifier."""

    def validate(self, draft: SessionDraft) -> Sequence[SessionRejection]:
        """Return every reason ``draft`` would be rejected."""

    def add(self, draft: SessionDraft) -> Session | SessionRejection:
        """Record a session or report why it was refused."""

    def remove(self, session_id: str) -> bool:
        """Delete a session; ``True`` if one was removed."""
