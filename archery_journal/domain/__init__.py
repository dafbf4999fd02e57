"""Domain layer with journal entities, scoring rules and derived views."""

from . import models, scoring, views

__all__ = ["models", "scoring", "views"]
