"""Repositories backed by the JSON slot adapter."""

from .codecs import ATHLETES_V1_KEY, ATHLETES_V2_KEY, SESSIONS_V1_KEY
from .participants import StoredParticipantRepository
from .sessions import InMemorySessionRepository

__all__ = [
    "ATHLETES_V1_KEY",
    "ATHLETES_V2_KEY",
    "SESSIONS_V1_KEY",
    "InMemorySessionRepository",
    "StoredParticipantRepository",
]
