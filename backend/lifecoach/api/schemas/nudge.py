"""Schemas for nudges."""
from __future__ import annotations

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator


class NudgeCreateRequest(BaseModel):
    user_id: UUID
    content: str = Field(..., min_length=1)

    @field_validator("content")
    @classmethod
    def trim_and_validate_content(cls, value: str) -> str:
        cleaned = value.strip()
        if not cleaned:
            raise ValueError("Content is required")
        if len(cleaned) > 150:
            raise ValueError("Content must be 150 characters or less")
        return cleaned


class NudgeCompleteRequest(BaseModel):
    user_id: UUID


class NudgeResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    content: str
    is_completed: bool
    completed_at: Optional[datetime]
    created_at: datetime
    updated_at: datetime


class NudgeEnvelope(BaseModel):
    nudge: NudgeResponse
    request_id: str


class NudgeListResponse(BaseModel):
    nudges: List[NudgeResponse]
    active_count: int
    request_id: str
