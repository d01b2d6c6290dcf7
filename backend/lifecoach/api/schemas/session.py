"""Schemas for coaching session history."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from lifecoach.api.schemas.coach import SuggestedActivity
from lifecoach.core.enums import EnergyLevel, SessionType


class SessionCreateRequest(BaseModel):
    user_id: UUID
    session_type: SessionType
    energy_level: EnergyLevel
    main_activity_id: Optional[UUID] = None
    duration_minutes: Optional[int] = Field(default=None, gt=0)


class SessionSummary(BaseModel):
    id: UUID
    user_id: UUID
    session_type: SessionType
    energy_level: EnergyLevel
    duration_minutes: Optional[int]
    created_at: datetime


class SessionActivityLink(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    session_id: UUID
    activity_id: UUID
    is_main: bool
    is_filler: bool


class SessionCreateResponse(BaseModel):
    session: SessionSummary
    session_activities: List[SessionActivityLink]
    request_id: str


class SessionHistoryItem(SessionSummary):
    main_activity: Optional[SuggestedActivity]


class SessionListResponse(BaseModel):
    sessions: List[SessionHistoryItem]
    request_id: str
