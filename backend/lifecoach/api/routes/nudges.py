"""Nudge routes, including the signed e-mail completion link."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from fastapi.responses import RedirectResponse
from sqlalchemy.orm import Session

from lifecoach.api.schemas.nudge import (
    NudgeCompleteRequest,
    NudgeCreateRequest,
    NudgeEnvelope,
    NudgeListResponse,
    NudgeResponse,
)
from lifecoach.core.config import settings
from lifecoach.core.errors import NudgeLinkError
from lifecoach.db.deps import get_db
from lifecoach.db.models.nudge import Nudge
from lifecoach.observability.metrics import log_metric
from lifecoach.observability.tracing import trace
from lifecoach.services.nudge_links import verify_completion_url
from lifecoach.services.nudge_service import (
    NudgeAlreadyCompletedError,
    complete_nudge,
    count_active_nudges,
    create_nudge,
    list_nudges,
)
from lifecoach.services.user_service import get_or_create_user

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/nudges", response_model=NudgeEnvelope, status_code=status.HTTP_201_CREATED, tags=["nudges"])
def create_nudge_endpoint(
    payload: NudgeCreateRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> NudgeEnvelope:
    request_id = getattr(http_request.state, "request_id", None)
    metadata = {
        "route": "/nudges",
        "user_id": str(payload.user_id),
        "content_length": len(payload.content),
        "request_id": request_id,
    }
    with trace("nudge.create", metadata=metadata, user_id=str(payload.user_id), request_id=request_id):
        get_or_create_user(db, payload.user_id)
        nudge = create_nudge(db, user_id=payload.user_id, content=payload.content)

    log_metric("nudge.create.success", 1, metadata={"user_id": str(payload.user_id)})
    return NudgeEnvelope(nudge=NudgeResponse.model_validate(nudge), request_id=request_id or "")


@router.get("/nudges", response_model=NudgeListResponse, tags=["nudges"])
def list_nudges_endpoint(
    http_request: Request,
    user_id: UUID = Query(..., description="User ID"),
    completed: bool = Query(False, description="Include completed nudges"),
    db: Session = Depends(get_db),
) -> NudgeListResponse:
    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "nudge.list",
        metadata={"route": "/nudges", "user_id": str(user_id), "completed": completed, "request_id": request_id},
        user_id=str(user_id),
        request_id=request_id,
    ):
        nudges = list_nudges(db, user_id, include_completed=completed)
        active_count = count_active_nudges(db, user_id)

    log_metric("nudge.list.active_count", active_count, metadata={"user_id": str(user_id)})
    return NudgeListResponse(
        nudges=[NudgeResponse.model_validate(nudge) for nudge in nudges],
        active_count=active_count,
        request_id=request_id or "",
    )


@router.patch("/nudges/{nudge_id}", response_model=NudgeEnvelope, tags=["nudges"])
def complete_nudge_endpoint(
    nudge_id: UUID,
    payload: NudgeCompleteRequest,
    http_request: Request,
    db: Session = Depends(get_db),
) -> NudgeEnvelope:
    """Mark a nudge as done from inside the app."""
    nudge = db.get(Nudge, nudge_id)
    if not nudge:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Nudge not found")
    if nudge.user_id != payload.user_id:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Nudge does not belong to user")

    request_id = getattr(http_request.state, "request_id", None)
    with trace(
        "nudge.complete",
        metadata={"route": f"/nudges/{nudge_id}", "nudge_id": str(nudge_id), "source": "app", "request_id": request_id},
        user_id=str(payload.user_id),
        request_id=request_id,
    ):
        try:
            nudge = complete_nudge(db, nudge, source="app", request_id=request_id)
        except NudgeAlreadyCompletedError as exc:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Nudge already completed") from exc

    log_metric("nudge.complete.success", 1, metadata={"source": "app"})
    return NudgeEnvelope(nudge=NudgeResponse.model_validate(nudge), request_id=request_id or "")


@router.get("/nudges/{nudge_id}/complete", tags=["nudges"])
def complete_nudge_from_email(
    nudge_id: str,
    http_request: Request,
    sig: str | None = Query(default=None),
    expires: str | None = Query(default=None),
    db: Session = Depends(get_db),
) -> RedirectResponse:
    """One-click completion from a reminder e-mail; always answers with a redirect."""
    request_id = getattr(http_request.state, "request_id", None)
    try:
        with trace(
            "nudge.complete_link",
            metadata={"nudge_id": nudge_id, "request_id": request_id},
            request_id=request_id,
        ):
            outcome = _complete_from_link(db, nudge_id, sig, expires, request_id)
    except Exception:
        # Opened from an e-mail client: always answer with a redirect.
        logger.exception("Error completing nudge %s from e-mail link", nudge_id)
        outcome = "error=internal-error"

    log_metric("nudge.complete_link.outcome", 1, metadata={"outcome": outcome})
    return RedirectResponse(url=f"{settings.public_base_url.rstrip('/')}/?{outcome}")


def _complete_from_link(db: Session, nudge_id: str, sig: str | None, expires: str | None, request_id: str | None) -> str:
    if not sig or not expires:
        return "error=invalid-link"

    try:
        if not verify_completion_url(nudge_id, sig, expires):
            return "error=expired-link"
    except NudgeLinkError as exc:
        logger.error("Error verifying completion URL for nudge %s: %s", nudge_id, exc)
        return "error=verification-failed"

    try:
        nudge_uuid = UUID(nudge_id)
    except ValueError:
        return "error=nudge-not-found"

    nudge = db.get(Nudge, nudge_uuid)
    if not nudge:
        return "error=nudge-not-found"
    if nudge.is_completed:
        return "nudge=already-completed"

    try:
        complete_nudge(db, nudge, source="email_link", request_id=request_id)
    except NudgeAlreadyCompletedError:
        return "nudge=already-completed"
    return "nudge=completed"
