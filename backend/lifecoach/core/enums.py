"""Shared enumerations for the coaching domain."""
from __future__ import annotations

from enum import Enum

_RANKS = {"low": 1, "medium": 2, "high": 3}


class _RankedLevel(str, Enum):
    """Three-step scale shared by priority, effort and energy."""

    @property
    def rank(self) -> int:
        return _RANKS[self.value]


class Priority(_RankedLevel):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EffortLevel(_RankedLevel):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class EnergyLevel(_RankedLevel):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SessionType(str, Enum):
    MORNING = "morning"
    AFTERNOON = "afternoon"
