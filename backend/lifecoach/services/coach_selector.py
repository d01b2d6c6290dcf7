"""Activity selection for coaching suggestions.

Given a user's activity catalog, their current energy level and the time of
day, pick the single best-fit activity (or none, meaning "rest") and attach a
quote and a reflection prompt. The selector is pure: it performs no I/O, does
not mutate its inputs and returns one of the objects it was given.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Type, TypeVar, Union
from uuid import UUID

from lifecoach.core.enums import EffortLevel, EnergyLevel, Priority, SessionType
from lifecoach.core.errors import InvalidArgument
from lifecoach.services.coach_copy import (
    REST_QUOTE,
    quote_for,
    reflection_prompt_for,
)

E = TypeVar("E", bound=Enum)


class ActivityLike(Protocol):
    id: Any
    name: str
    priority: Union[Priority, str]
    effort_level: Union[EffortLevel, str]


@dataclass(frozen=True)
class ActivitySnapshot:
    """Read-only copy of an activity row, convenient for callers without an ORM object."""

    id: Union[UUID, str]
    name: str
    priority: Priority
    effort_level: EffortLevel


@dataclass(frozen=True)
class CoachSuggestion:
    main_activity: Optional[ActivityLike]
    quote: str
    reflection_prompt: str


def select_activity(
    activities: Sequence[ActivityLike],
    energy_level: Union[EnergyLevel, str],
    session_type: Union[SessionType, str],
) -> CoachSuggestion:
    """Return the coaching suggestion for the given catalog and context.

    Raises InvalidArgument when energy_level or session_type is not one of
    the enumerated values. An empty catalog, or one where every activity needs
    more effort than the user has energy for, is not an error: the result then
    has ``main_activity=None`` and rest-themed copy.
    """
    energy = _coerce(EnergyLevel, energy_level, "energy_level")
    session = _coerce(SessionType, session_type, "session_type")

    eligible = [activity for activity in activities if _effort(activity).rank <= energy.rank]
    if not eligible:
        return CoachSuggestion(
            main_activity=None,
            quote=REST_QUOTE,
            reflection_prompt=reflection_prompt_for(session, energy),
        )

    ranked = rank_activities(eligible)
    policy = SELECTION_POLICIES[energy]
    main_activity = policy(ranked)

    return CoachSuggestion(
        main_activity=main_activity,
        quote=quote_for(energy, _priority(main_activity)),
        reflection_prompt=reflection_prompt_for(session, energy),
    )


def rank_activities(activities: Sequence[ActivityLike]) -> List[ActivityLike]:
    """Order by priority (high first), then effort (low first).

    ``sorted`` is stable, so activities tied on both keys keep catalog order.
    """
    return sorted(activities, key=lambda activity: (-_priority(activity).rank, _effort(activity).rank))


def _prefer_high_priority(ranked: List[ActivityLike]) -> ActivityLike:
    for activity in ranked:
        if _priority(activity) is Priority.HIGH:
            return activity
    return ranked[0]


def _best_ranked(ranked: List[ActivityLike]) -> ActivityLike:
    return ranked[0]


# Medium and high energy lean on high-priority work; low energy takes whatever
# ranks best. With the current ordering both policies pick the same activity.
SELECTION_POLICIES: Dict[EnergyLevel, Callable[[List[ActivityLike]], ActivityLike]] = {
    EnergyLevel.HIGH: _prefer_high_priority,
    EnergyLevel.MEDIUM: _prefer_high_priority,
    EnergyLevel.LOW: _best_ranked,
}


def _priority(activity: ActivityLike) -> Priority:
    return Priority(activity.priority)


def _effort(activity: ActivityLike) -> EffortLevel:
    return EffortLevel(activity.effort_level)


def _coerce(enum_cls: Type[E], value: Any, field: str) -> E:
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError as exc:
        raise InvalidArgument(field, value, [member.value for member in enum_cls]) from exc
