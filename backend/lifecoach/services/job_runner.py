"""Batch job runner for nudge reminder e-mails."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from lifecoach.db.models.nudge import Nudge
from lifecoach.db.models.user import User
from lifecoach.services.notifications.hooks import send_nudge_reminder_for_user


logger = logging.getLogger(__name__)


@dataclass
class JobError:
    user_id: UUID
    error: str


@dataclass
class JobRunResult:
    users_processed: int = 0
    emails_sent: int = 0
    failed: int = 0
    errors: List[JobError] = field(default_factory=list)

    @property
    def message(self) -> str:
        return (
            f"Processed {self.users_processed} users, sent {self.emails_sent} emails, "
            f"{self.failed} failed"
        )


def _users_with_active_nudges(db: Session) -> List[UUID]:
    rows = (
        db.query(Nudge.user_id)
        .filter(Nudge.is_completed.is_(False))
        .distinct()
        .order_by(Nudge.user_id)
        .all()
    )
    return [row[0] for row in rows]


def run_nudge_reminders_for_user(db: Session, user_id: UUID, *, request_id: str | None = None) -> bool:
    """Send one user's reminder; True when a message went out.

    Raises ValueError for an unknown user.
    """
    user = db.get(User, user_id)
    if not user:
        raise ValueError(f"User {user_id} not found")
    result = send_nudge_reminder_for_user(db, user, request_id)
    return result.status != "skipped"


def run_nudge_reminders_for_all_users(
    db: Session,
    *,
    user_ids: Optional[Iterable[UUID]] = None,
    request_id: str | None = None,
) -> JobRunResult:
    ids = _users_with_active_nudges(db) if user_ids is None else list(dict.fromkeys(user_ids))
    result = JobRunResult()
    for uid in ids:
        try:
            sent = run_nudge_reminders_for_user(db, uid, request_id=request_id)
        except Exception as exc:
            db.rollback()
            logger.exception("Nudge reminder failed for user %s", uid)
            result.failed += 1
            result.users_processed += 1
            result.errors.append(JobError(user_id=uid, error=str(exc) or exc.__class__.__name__))
            continue
        result.users_processed += 1
        if sent:
            result.emails_sent += 1
    return result
