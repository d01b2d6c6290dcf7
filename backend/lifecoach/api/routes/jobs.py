"""Operational endpoints for scheduled jobs."""
from __future__ import annotations

import hmac
from time import perf_counter
from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status
from sqlalchemy.orm import Session

from lifecoach.api.schemas.jobs import JobError as JobErrorPayload
from lifecoach.api.schemas.jobs import JobRunRequest, JobRunResponse
from lifecoach.core.config import settings
from lifecoach.db.deps import get_db
from lifecoach.db.models.user import User
from lifecoach.observability.metrics import log_metric
from lifecoach.observability.tracing import trace
from lifecoach.services.job_runner import JobRunResult, run_nudge_reminders_for_all_users

router = APIRouter()


@router.get("/jobs", tags=["jobs"])
def get_jobs_config(request: Request) -> dict:
    request_id = getattr(request.state, "request_id", None)
    with trace("jobs.config", metadata={"request_id": request_id}, request_id=request_id):
        data = {
            "scheduler_enabled": settings.scheduler_enabled,
            "schedule": {
                "timezone": settings.scheduler_timezone,
                "nudge_reminder_time": f"{settings.nudge_job_hour:02d}:{settings.nudge_job_minute:02d}",
            },
        }
    return {**data, "request_id": request_id or ""}


@router.post("/jobs/run-now", response_model=JobRunResponse, tags=["jobs"])
def run_job_now(
    request: Request,
    payload: JobRunRequest,
    db: Session = Depends(get_db),
) -> JobRunResponse:
    if not settings.debug:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Run-now only allowed in debug mode")

    if payload.user_id and not db.get(User, payload.user_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    request_id = getattr(request.state, "request_id", None)
    user_ids = [payload.user_id] if payload.user_id else None
    result = _run_nudge_job(db, "jobs.run_now", request_id=request_id, user_ids=user_ids)
    return _response(payload.job, result, request_id)


@router.post("/cron/nudge-reminder", response_model=JobRunResponse, tags=["jobs"])
def run_nudge_reminder_cron(
    request: Request,
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
) -> JobRunResponse:
    """Entry point for an external cron; guarded by CRON_SECRET when one is set."""
    if settings.cron_secret and not _bearer_matches(authorization, settings.cron_secret):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")

    request_id = getattr(request.state, "request_id", None)
    result = _run_nudge_job(db, "jobs.cron", request_id=request_id)
    return _response("nudge_reminders", result, request_id)


def _bearer_matches(authorization: Optional[str], secret: str) -> bool:
    expected = f"Bearer {secret}".encode("utf-8")
    return hmac.compare_digest((authorization or "").encode("utf-8"), expected)


def _run_nudge_job(db: Session, trace_name: str, *, request_id: str | None, user_ids=None) -> JobRunResult:
    start = perf_counter()
    with trace(trace_name, metadata={"job": "nudge_reminders", "request_id": request_id}, request_id=request_id):
        result = run_nudge_reminders_for_all_users(db, user_ids=user_ids, request_id=request_id)

    latency_ms = (perf_counter() - start) * 1000
    log_metric(f"{trace_name}.success", 1, metadata={"job": "nudge_reminders"})
    log_metric(f"{trace_name}.emails_sent", result.emails_sent, metadata={"job": "nudge_reminders"})
    log_metric(f"{trace_name}.failed", result.failed, metadata={"job": "nudge_reminders"})
    log_metric(f"{trace_name}.latency_ms", latency_ms, metadata={"job": "nudge_reminders"})
    return result


def _response(job: str, result: JobRunResult, request_id: str | None) -> JobRunResponse:
    return JobRunResponse(
        job=job,
        users_processed=result.users_processed,
        emails_sent=result.emails_sent,
        failed=result.failed,
        errors=[JobErrorPayload(user_id=error.user_id, error=error.error) for error in result.errors],
        message=result.message,
        request_id=request_id or "",
    )
