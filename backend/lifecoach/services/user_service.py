"""Helpers for working with users."""
from __future__ import annotations

from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from lifecoach.db.models.user import User


class DuplicateEmailError(ValueError):
    """Raised when a profile is registered with an e-mail that is already taken."""


def get_or_create_user(db: Session, user_id: UUID) -> User:
    """Fetch an existing user or create a bare row safely."""
    user = db.get(User, user_id)
    if user:
        return user

    user = User(id=user_id)
    db.add(user)
    try:
        db.flush()
        return user
    except IntegrityError:
        db.rollback()
        existing = db.get(User, user_id)
        if existing:
            return existing
        raise


def register_user(db: Session, *, email: str, name: str) -> User:
    normalized = email.strip().lower()
    if db.query(User.id).filter(User.email == normalized).first():
        raise DuplicateEmailError(normalized)

    user = User(email=normalized, name=name)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateEmailError(normalized) from exc
    db.refresh(user)
    return user
