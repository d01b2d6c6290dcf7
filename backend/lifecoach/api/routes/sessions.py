"""Coaching session history routes."""
from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.orm import Session

from lifecoach.api.schemas.coach import SuggestedActivity
from lifecoach.api.schemas.session import (
    SessionActivityLink,
    SessionCreateRequest,
    SessionCreateResponse,
    SessionHistoryItem,
    SessionListResponse,
    SessionSummary,
)
from lifecoach.db.deps import get_db
from lifecoach.db.models.coaching_session import CoachingSession
from lifecoach.observability.metrics import log_metric
from lifecoach.observability.tracing import trace
from lifecoach.services.session_service import create_session, list_sessions
from lifecoach.services.user_service import get_or_create_user

router = APIRouter()


@router.post(
    "/sessions",
    response_model=SessionCreateResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["sessions"],
)
def create_session_endpoint(
    payload: SessionCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> SessionCreateResponse:
    """Log a completed (or skipped) coaching session."""
    request_id = getattr(http_request.state, "request_id", None)
    metadata = {
        "route": "/sessions",
        "user_id": str(payload.user_id),
        "session_type": payload.session_type.value,
        "energy_level": payload.energy_level.value,
        "has_main_activity": payload.main_activity_id is not None,
        "duration_minutes": payload.duration_minutes,
        "request_id": request_id,
    }
    with trace("session.create", metadata=metadata, user_id=str(payload.user_id), request_id=request_id):
        get_or_create_user(db, payload.user_id)
        coaching_session, links = create_session(
            db,
            user_id=payload.user_id,
            session_type=payload.session_type,
            energy_level=payload.energy_level,
            main_activity_id=payload.main_activity_id,
            duration_minutes=payload.duration_minutes,
        )

    log_metric("session.create.success", 1, metadata={"user_id": str(payload.user_id)})
    if payload.duration_minutes:
        log_metric("session.create.duration_minutes", payload.duration_minutes, metadata={"user_id": str(payload.user_id)})

    return SessionCreateResponse(
        session=_summary(coaching_session),
        session_activities=[SessionActivityLink.model_validate(link) for link in links],
        request_id=request_id or "",
    )


@router.get("/sessions", response_model=SessionListResponse, tags=["sessions"])
def list_sessions_endpoint(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID"),
    db: Session = Depends(get_db),
) -> SessionListResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "session.list",
        metadata={"route": "/sessions", "user_id": str(user_id), "request_id": request_id},
        user_id=str(user_id),
        request_id=request_id,
    ):
        records = list_sessions(db, user_id)

    log_metric("session.list.count", len(records), metadata={"user_id": str(user_id)})
    return SessionListResponse(
        sessions=[
            SessionHistoryItem(
                **_summary(record.session).model_dump(),
                main_activity=SuggestedActivity.model_validate(record.main_activity) if record.main_activity else None,
            )
            for record in records
        ],
        request_id=request_id or "",
    )


def _summary(coaching_session: CoachingSession) -> SessionSummary:
    return SessionSummary(
        id=coaching_session.id,
        user_id=coaching_session.user_id,
        session_type=coaching_session.session_type,
        energy_level=coaching_session.energy_level,
        duration_minutes=coaching_session.duration_minutes,
        created_at=coaching_session.created_at,
    )
