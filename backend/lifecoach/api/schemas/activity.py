"""Schemas for activity management."""
from __future__ import annotations

from datetime import datetime
from typing import List
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from lifecoach.core.enums import EffortLevel, Priority


class ActivityPayload(BaseModel):
    user_id: UUID
    name: str = Field(..., min_length=1, max_length=200)
    priority: Priority
    effort_level: EffortLevel

    @field_validator("name")
    @classmethod
    def trim_name(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Name is required")
        return cleaned


class ActivityResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    priority: Priority
    effort_level: EffortLevel
    created_at: datetime
    updated_at: datetime


class ActivityEnvelope(BaseModel):
    activity: ActivityResponse
    request_id: str


class ActivityListResponse(BaseModel):
    activities: List[ActivityResponse]
    request_id: str


class ActivityDeleteResponse(BaseModel):
    message: str
    request_id: str
