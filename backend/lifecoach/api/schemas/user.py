"""Schemas for user profiles."""
from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

MAX_NAME_LENGTH = 50


def _clean_name(value: str) -> str:
    cleaned = value.strip()
    if not cleaned:
        raise ValueError("Name is required")
    if len(cleaned) > MAX_NAME_LENGTH:
        raise ValueError(f"Name must be {MAX_NAME_LENGTH} characters or fewer")
    return cleaned


class UserCreateRequest(BaseModel):
    email: EmailStr
    name: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def trim_name(cls, value: str) -> str:
        return _clean_name(value)


class UserUpdateRequest(BaseModel):
    name: str = Field(..., min_length=1)

    @field_validator("name")
    @classmethod
    def trim_name(cls, value: str) -> str:
        return _clean_name(value)


class UserResponse(BaseModel):
    id: UUID
    email: Optional[str]
    name: Optional[str]
    created_at: datetime
    request_id: str


class UserDeleteResponse(BaseModel):
    success: bool
    request_id: str
