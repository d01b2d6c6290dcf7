"""Nudge ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, String, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from lifecoach.db.base import Base


class Nudge(Base):
    __tablename__ = "nudges"
    __table_args__ = (
        Index("ix_nudges_user_id", "user_id"),
        Index("ix_nudges_is_completed", "is_completed"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    user_id = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    content = Column(String(length=150), nullable=False)
    is_completed = Column(Boolean, nullable=False, server_default=sa_text("false"))
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
