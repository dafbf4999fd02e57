"""Scoring-mode defaults and point rules for archery sessions.

Long outdoor distances make centre shots impractical to call, so sessions at
70 m and beyond default to counting hits only. The operator may override the
default; :class:`ScoringModeSelector` tracks whether that has happened while
a session is being edited.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Optional

from archery_journal.domain.models import ScoringMode, TargetZone

HITS_ONLY_DISTANCE: Final[float] = 70
DEFAULT_DISTANCE: Final[float] = 18
DEFAULT_SETS_COUNT: Final[int] = 7
DEFAULT_ARROWS_PER_SET: Final[int] = 5
DISTANCE_SUGGESTIONS: Final[tuple[int, ...]] = (18, 35, 50, 70, 90, 120, 150)

_CENTER_POINTS: Final[dict[TargetZone, int]] = {
    TargetZone.HEAD: 3,
    TargetZone.BELLY: 2,
}


def default_mode_for_distance(distance: float) -> ScoringMode:
    """Return the scoring mode a session gets when nobody overrides it.

    >>> default_mode_for_distance(90).value
    'hitsOnly'
    >>> default_mode_for_distance(18).value
    'normal'
    """

    if distance >= HITS_ONLY_DISTANCE:
        return ScoringMode.HITS_ONLY
    return ScoringMode.NORMAL


@dataclass(frozen=True, slots=True)
class ScoringRules:
    """Points awarded per arrow; ``None`` marks a disabled outcome."""

    hit_points: Optional[int]
    center_points: Optional[int]

    @property
    def center_enabled(self) -> bool:
        return self.center_points is not None

    @property
    def hit_enabled(self) -> bool:
        return self.hit_points is not None


def rules_for(mode: ScoringMode | str, target: TargetZone | str) -> ScoringRules:
    """Return point rules for ``mode`` when aiming at ``target``."""

    mode = ScoringMode(mode)
    target = TargetZone(target)
    if mode is ScoringMode.HITS_ONLY:
        return ScoringRules(hit_points=1, center_points=None)
    if mode is ScoringMode.CENTER_ONLY:
        return ScoringRules(hit_points=None, center_points=1)
    return ScoringRules(hit_points=1, center_points=_CENTER_POINTS[target])


class ScoringModeSelector:
    """Scoring mode of a session being edited.

    Follows :func:`default_mode_for_distance` until :meth:`choose` is called;
    from then on the chosen mode sticks regardless of distance changes.
    """

    def __init__(self, distance: float = DEFAULT_DISTANCE) -> None:
        self._distance = distance
        self._chosen: Optional[ScoringMode] = None

    @property
    def mode(self) -> ScoringMode:
        if self._chosen is not None:
            return self._chosen
        return default_mode_for_distance(self._distance)

    @property
    def touched(self) -> bool:
        return self._chosen is not None

    @property
    def override(self) -> Optional[ScoringMode]:
        """Operator's explicit choice, ``None`` while auto-selecting."""

        return self._chosen

    def set_distance(self, distance: float) -> ScoringMode:
        self._distance = distance
        return self.mode

    def choose(self, mode: ScoringMode | str) -> ScoringMode:
        self._chosen = ScoringMode(mode)
        return self._chosen
