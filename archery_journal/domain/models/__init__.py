"""Domain data transfer objects used across the journal."""

from .entities import (
    Environment,
    Participant,
    ScoringMode,
    Session,
    SessionDraft,
    SessionParticipant,
    SessionRejection,
    TargetZone,
    compute_age,
)

__all__ = [
    "Environment",
    "Participant",
    "ScoringMode",
    "Session",
    "SessionDraft",
    "SessionParticipant",
    "SessionRejection",
    "TargetZone",
    "compute_age",
]
