"""Facade grouping the journal repositories behind a single object."""

from __future__ import annotations

from typing import Protocol

from .repositories import ParticipantRepository, SessionRepository


class Journal(Protocol):
    """Entry point the presentation layer talks to."""

    @property
    def participants(self) -> ParticipantRepository:
        """Return repository managing the roster."""

    @property
    def sessions(self) -> SessionRepository:
        """Return repository managing shooting sessions."""

    @property
    def language(self) -> str:
        """Default UI language configured for this journal."""
