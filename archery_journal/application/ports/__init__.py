"""Ports define the contracts between application layer and adapters."""

from .journal import Journal
from .repositories import ParticipantRepository, SessionRepository
from .storage import KeyValueStore, StorageQuotaExceededError, StorageUnavailableError

__all__ = [
    "Journal",
    "KeyValueStore",
    "ParticipantRepository",
    "SessionRepository",
    "StorageQuotaExceededError",
    "StorageUnavailableError",
]
