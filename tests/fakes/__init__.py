"""In-memory fakes for storage and time used in tests."""

from .clock import SequentialIds, TickingClock
from .storage import KeyValueStoreFake

__all__ = [
    "KeyValueStoreFake",
    "SequentialIds",
    "TickingClock",
]
