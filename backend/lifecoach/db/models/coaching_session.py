"""Coaching session ORM models."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from lifecoach.db.base import Base


class CoachingSession(Base):
    __tablename__ = "sessions"
    __table_args__ = (Index("ix_sessions_user_id", "user_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    session_type = Column(String(length=16), nullable=False)
    energy_level = Column(String(length=16), nullable=False)
    duration_minutes = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


class SessionActivity(Base):
    __tablename__ = "session_activities"
    __table_args__ = (Index("ix_session_activities_session_id", "session_id"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    session_id = Column(UUID(as_uuid=True), ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False)
    activity_id = Column(UUID(as_uuid=True), ForeignKey("activities.id", ondelete="CASCADE"), nullable=False)
    is_main = Column(Boolean, nullable=False, server_default=sa_text("false"))
    is_filler = Column(Boolean, nullable=False, server_default=sa_text("false"))
