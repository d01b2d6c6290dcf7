"""Schemas for coaching suggestions."""
from __future__ import annotations

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from lifecoach.core.enums import EffortLevel, EnergyLevel, Priority, SessionType


class CoachRequest(BaseModel):
    user_id: UUID
    session_type: SessionType
    energy_level: EnergyLevel


class SuggestedActivity(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    priority: Priority
    effort_level: EffortLevel


class SuggestionPayload(BaseModel):
    main_activity: Optional[SuggestedActivity]
    quote: str
    reflection_prompt: str


class CoachResponse(BaseModel):
    suggestion: SuggestionPayload
    request_id: str
