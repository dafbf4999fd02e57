"""Factories for domain models used in tests."""

from .domain import ParticipantFactory, SessionFactory, SessionParticipantFactory

__all__ = [
    "ParticipantFactory",
    "SessionFactory",
    "SessionParticipantFactory",
]
