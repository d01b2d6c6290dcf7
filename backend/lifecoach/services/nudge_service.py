"""Nudge queries and state changes."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import asc, desc, func
from sqlalchemy.orm import Session

from lifecoach.db.models.action_log import ActionLog
from lifecoach.db.models.nudge import Nudge


class NudgeAlreadyCompletedError(ValueError):
    """Raised when completing a nudge that is already done."""


def create_nudge(db: Session, *, user_id: UUID, content: str) -> Nudge:
    nudge = Nudge(user_id=user_id, content=content)
    db.add(nudge)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(nudge)
    return nudge


def list_nudges(db: Session, user_id: UUID, *, include_completed: bool = False) -> List[Nudge]:
    """Nudges newest first; only active ones unless ``include_completed``."""
    query = db.query(Nudge).filter(Nudge.user_id == user_id)
    if not include_completed:
        query = query.filter(Nudge.is_completed.is_(False))
    return query.order_by(desc(Nudge.created_at), desc(Nudge.id)).all()


def active_nudges(db: Session, user_id: UUID) -> List[Nudge]:
    """Active nudges oldest first, the order they appear in reminder e-mails."""
    return (
        db.query(Nudge)
        .filter(Nudge.user_id == user_id, Nudge.is_completed.is_(False))
        .order_by(asc(Nudge.created_at), asc(Nudge.id))
        .all()
    )


def count_active_nudges(db: Session, user_id: UUID) -> int:
    return (
        db.query(func.count(Nudge.id))
        .filter(Nudge.user_id == user_id, Nudge.is_completed.is_(False))
        .scalar()
        or 0
    )


def complete_nudge(db: Session, nudge: Nudge, *, source: str, request_id: Optional[str] = None) -> Nudge:
    """Mark a nudge done and record who did it (``app`` or ``email_link``)."""
    if nudge.is_completed:
        raise NudgeAlreadyCompletedError(str(nudge.id))

    nudge.is_completed = True
    nudge.completed_at = datetime.now(timezone.utc)
    log = ActionLog(
        user_id=nudge.user_id,
        action_type="nudge_completed",
        action_payload={
            "nudge_id": str(nudge.id),
            "source": source,
            "request_id": request_id or "",
        },
        reason="Nudge marked as done",
    )
    try:
        db.add(nudge)
        db.add(log)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(nudge)
    return nudge
