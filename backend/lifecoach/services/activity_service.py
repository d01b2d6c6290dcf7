"""Activity catalog queries and mutations."""
from __future__ import annotations

from typing import List
from uuid import UUID

from sqlalchemy import asc, desc
from sqlalchemy.orm import Session

from lifecoach.core.enums import EffortLevel, Priority
from lifecoach.db.models.activity import Activity


def list_activities(db: Session, user_id: UUID) -> List[Activity]:
    """Activities for display, newest first."""
    return (
        db.query(Activity)
        .filter(Activity.user_id == user_id)
        .order_by(desc(Activity.created_at), desc(Activity.id))
        .all()
    )


def load_catalog(db: Session, user_id: UUID) -> List[Activity]:
    """Activities in a stable order for the coaching selector.

    The selector breaks ties by input order, so the catalog is sorted by
    creation time with the id as a final key.
    """
    return (
        db.query(Activity)
        .filter(Activity.user_id == user_id)
        .order_by(asc(Activity.created_at), asc(Activity.id))
        .all()
    )


def create_activity(
    db: Session,
    *,
    user_id: UUID,
    name: str,
    priority: Priority,
    effort_level: EffortLevel,
) -> Activity:
    activity = Activity(
        user_id=user_id,
        name=name,
        priority=priority.value,
        effort_level=effort_level.value,
    )
    db.add(activity)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(activity)
    return activity


def update_activity(
    db: Session,
    activity: Activity,
    *,
    name: str,
    priority: Priority,
    effort_level: EffortLevel,
) -> Activity:
    activity.name = name
    activity.priority = priority.value
    activity.effort_level = effort_level.value
    db.add(activity)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(activity)
    return activity


def delete_activity(db: Session, activity: Activity) -> None:
    db.delete(activity)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
