"""Persistence helpers for coaching sessions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import desc
from sqlalchemy.orm import Session

from lifecoach.core.enums import EnergyLevel, SessionType
from lifecoach.db.models.activity import Activity
from lifecoach.db.models.coaching_session import CoachingSession, SessionActivity


@dataclass
class SessionRecord:
    session: CoachingSession
    main_activity: Optional[Activity]


def create_session(
    db: Session,
    *,
    user_id: UUID,
    session_type: SessionType,
    energy_level: EnergyLevel,
    main_activity_id: Optional[UUID],
    duration_minutes: Optional[int],
) -> Tuple[CoachingSession, List[SessionActivity]]:
    """Store a session and, when the activity is the user's own, link it as the main activity.

    An unknown or foreign ``main_activity_id`` is ignored rather than rejected.
    """
    coaching_session = CoachingSession(
        user_id=user_id,
        session_type=session_type.value,
        energy_level=energy_level.value,
        duration_minutes=duration_minutes,
    )
    links: List[SessionActivity] = []
    try:
        db.add(coaching_session)
        db.flush()

        if main_activity_id is not None:
            activity = db.get(Activity, main_activity_id)
            if activity and activity.user_id == user_id:
                link = SessionActivity(
                    session_id=coaching_session.id,
                    activity_id=activity.id,
                    is_main=True,
                    is_filler=False,
                )
                db.add(link)
                links.append(link)

        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(coaching_session)
    for link in links:
        db.refresh(link)
    return coaching_session, links


def list_sessions(db: Session, user_id: UUID) -> List[SessionRecord]:
    """Sessions for a user, newest first, each with its main activity (if any)."""
    sessions = (
        db.query(CoachingSession)
        .filter(CoachingSession.user_id == user_id)
        .order_by(desc(CoachingSession.created_at), desc(CoachingSession.id))
        .all()
    )
    if not sessions:
        return []

    rows = (
        db.query(SessionActivity.session_id, Activity)
        .join(Activity, Activity.id == SessionActivity.activity_id)
        .filter(
            SessionActivity.session_id.in_([item.id for item in sessions]),
            SessionActivity.is_main.is_(True),
        )
        .all()
    )
    main_by_session: Dict[UUID, Activity] = {}
    for session_id, activity in rows:
        main_by_session.setdefault(session_id, activity)

    return [SessionRecord(session=item, main_activity=main_by_session.get(item.id)) for item in sessions]
