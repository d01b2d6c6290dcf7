"""Weekly review route."""
from __future__ import annotations

from datetime import date
from time import perf_counter
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from lifecoach.api.schemas.weekly_review import WeeklyReviewResponse
from lifecoach.db.deps import get_db
from lifecoach.observability.metrics import log_metric
from lifecoach.observability.tracing import trace
from lifecoach.services.weekly_review import get_weekly_review

router = APIRouter()


@router.get("/weekly-review", response_model=WeeklyReviewResponse, tags=["weekly-review"])
def weekly_review(
    request: Request,
    user_id: UUID = Query(..., description="User ID"),
    week_start: Optional[date] = Query(default=None, description="First day (Sunday) of the week to review"),
    db: Session = Depends(get_db),
) -> WeeklyReviewResponse:
    request_id = getattr(request.state, "request_id", None)
    metadata = {
        "user_id": str(user_id),
        "week_start": week_start.isoformat() if week_start else None,
        "request_id": request_id,
    }
    start = perf_counter()
    with trace("weekly_review.get", metadata=metadata, user_id=str(user_id), request_id=request_id):
        review = get_weekly_review(db, user_id, week_start)

    latency_ms = (perf_counter() - start) * 1000
    log_metric("weekly_review.get.success", 1, metadata={"user_id": str(user_id)})
    log_metric(
        "weekly_review.get.high_priority_percentage",
        review.high_priority_percentage,
        metadata={"user_id": str(user_id)},
    )
    log_metric("weekly_review.get.latency_ms", latency_ms, metadata={"user_id": str(user_id)})

    return WeeklyReviewResponse(**review.model_dump(), user_id=user_id, request_id=request_id or "")
