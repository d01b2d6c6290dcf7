"""Schemas for job operations endpoints."""
from __future__ import annotations

from typing import List, Literal, Optional
from uuid import UUID

from pydantic import BaseModel


class JobRunRequest(BaseModel):
    job: Literal["nudge_reminders"] = "nudge_reminders"
    user_id: Optional[UUID] = None


class JobError(BaseModel):
    user_id: UUID
    error: str


class JobRunResponse(BaseModel):
    job: str
    users_processed: int
    emails_sent: int
    failed: int
    errors: List[JobError]
    message: str
    request_id: str
