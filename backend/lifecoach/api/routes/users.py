"""User profile routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from lifecoach.api.schemas.user import UserCreateRequest, UserDeleteResponse, UserResponse, UserUpdateRequest
from lifecoach.db.deps import get_db
from lifecoach.db.models.user import User
from lifecoach.observability.metrics import log_metric
from lifecoach.observability.tracing import trace
from lifecoach.services.user_service import DuplicateEmailError, register_user

router = APIRouter()


@router.post("/users", response_model=UserResponse, status_code=status.HTTP_201_CREATED, tags=["users"])
def create_user_endpoint(
    payload: UserCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> UserResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace("user.create", metadata={"route": "/users", "request_id": request_id}, request_id=request_id):
        try:
            user = register_user(db, email=payload.email, name=payload.name)
        except DuplicateEmailError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="User already exists") from exc

    log_metric("user.create.success", 1)
    return _response(user, request_id)


@router.patch("/users/{user_id}", response_model=UserResponse, tags=["users"])
def update_user_endpoint(
    user_id: UUID,
    payload: UserUpdateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> UserResponse:
    user = _get_user(db, user_id)
    request_id = getattr(http_request.state, "request_id", None)
    with trace("user.update", metadata={"user_id": str(user_id), "request_id": request_id}, user_id=str(user_id), request_id=request_id):
        user.name = payload.name
        try:
            db.add(user)
            db.commit()
        except Exception:
            db.rollback()
            raise
        db.refresh(user)

    log_metric("user.update.success", 1, metadata={"user_id": str(user_id)})
    return _response(user, request_id)


@router.delete("/users/{user_id}", response_model=UserDeleteResponse, tags=["users"])
def delete_user_endpoint(
    user_id: UUID,
    http_request: Request,
    db: Session = Depends(get_db),
) -> UserDeleteResponse:
    """Delete the account; activities, sessions and nudges go with it."""
    user = _get_user(db, user_id)
    request_id = getattr(http_request.state, "request_id", None)
    with trace("user.delete", metadata={"user_id": str(user_id), "request_id": request_id}, user_id=str(user_id), request_id=request_id):
        try:
            db.delete(user)
            db.commit()
        except Exception:
            db.rollback()
            raise

    log_metric("user.delete.success", 1, metadata={"user_id": str(user_id)})
    return UserDeleteResponse(success=True, request_id=request_id or "")


def _get_user(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


def _response(user: User, request_id: str | None) -> UserResponse:
    return UserResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        created_at=user.created_at,
        request_id=request_id or "",
    )
