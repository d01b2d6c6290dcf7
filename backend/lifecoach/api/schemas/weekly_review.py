"""Schemas for the weekly review endpoint."""
from __future__ import annotations

from datetime import date
from typing import List
from uuid import UUID

from pydantic import BaseModel

from lifecoach.api.schemas.coach import SuggestedActivity


class WeekWindow(BaseModel):
    start: date
    end: date


class ActivityTime(BaseModel):
    activity: SuggestedActivity
    total_minutes: int
    session_count: int


class PriorityMinutes(BaseModel):
    high: int = 0
    medium: int = 0
    low: int = 0
    total: int = 0


class CoachMessage(BaseModel):
    title: str
    message: str


class WeeklyReview(BaseModel):
    week: WeekWindow
    session_count: int
    top_activities: List[ActivityTime]
    priority_minutes: PriorityMinutes
    high_priority_percentage: int
    coach_message: CoachMessage


class WeeklyReviewResponse(WeeklyReview):
    user_id: UUID
    request_id: str
