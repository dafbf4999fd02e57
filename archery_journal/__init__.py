"""Archery training journal: participant roster and shooting-session log."""

__version__ = "0.1.0"
