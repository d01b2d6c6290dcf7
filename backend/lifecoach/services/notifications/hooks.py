"""Nudge reminder delivery for a single user."""
from __future__ import annotations

import logging
from time import perf_counter

from sqlalchemy.orm import Session

from lifecoach.core.config import settings
from lifecoach.db.models.action_log import ActionLog
from lifecoach.db.models.user import User
from lifecoach.observability.metrics import log_metric
from lifecoach.observability.tracing import trace
from lifecoach.services.notifications.base import NotificationResult, NudgeReminderItem
from lifecoach.services.notifications.factory import get_notification_service
from lifecoach.services.notifications.templates import display_name_for
from lifecoach.services.nudge_links import generate_completion_url
from lifecoach.services.nudge_service import active_nudges


logger = logging.getLogger(__name__)


def send_nudge_reminder_for_user(db: Session, user: User, request_id: str | None) -> NotificationResult:
    """E-mail the user's active nudges and record the outcome in the action log.

    Provider errors propagate without writing an action-log row.
    """
    if not settings.notifications_enabled:
        result = NotificationResult(status="skipped", reason="notifications disabled")
        _record_notification_log(db, user, result=result, nudge_count=0, request_id=request_id)
        return result

    if not user.email:
        result = NotificationResult(status="skipped", reason="no email on file")
        _record_notification_log(db, user, result=result, nudge_count=0, request_id=request_id)
        return result

    # Re-read inside the job: nudges may have been completed since the user was selected.
    nudges = active_nudges(db, user.id)
    if not nudges:
        result = NotificationResult(status="skipped", reason="no active nudges")
        _record_notification_log(db, user, result=result, nudge_count=0, request_id=request_id)
        return result

    items = [
        NudgeReminderItem(
            nudge_id=nudge.id,
            content=nudge.content,
            completion_url=generate_completion_url(nudge.id, settings.public_base_url),
        )
        for nudge in nudges
    ]

    service = get_notification_service()
    metadata = {
        "user_id": str(user.id),
        "provider": settings.notifications_provider,
        "nudge_count": len(items),
    }
    start = perf_counter()
    with trace(
        "notifications.nudge_reminder",
        metadata=metadata,
        user_id=str(user.id),
        request_id=request_id,
    ):
        result = service.send_nudge_reminder(
            user_id=user.id,
            email=user.email,
            display_name=display_name_for(user.name),
            items=items,
            request_id=request_id,
        )
    duration_ms = (perf_counter() - start) * 1000
    log_metric("notifications.sent", 1, metadata={"job": "nudge_reminder", "provider": settings.notifications_provider})
    log_metric("notifications.duration_ms", duration_ms, metadata={"job": "nudge_reminder"})
    _record_notification_log(db, user, result=result, nudge_count=len(items), request_id=request_id)
    return result


def _record_notification_log(
    db: Session,
    user: User,
    *,
    result: NotificationResult,
    nudge_count: int,
    request_id: str | None,
) -> None:
    if result.status == "skipped":
        log_metric("notifications.skipped", 1, metadata={"job": "nudge_reminder", "reason": result.reason})
    payload = {
        "provider": settings.notifications_provider,
        "result": result.__dict__,
        "nudge_count": nudge_count,
        "request_id": request_id or "",
    }
    notification_log = ActionLog(
        user_id=user.id,
        action_type="notification_nudge_reminder",
        action_payload=payload,
        reason="Notification dispatched" if result.status != "skipped" else "Notification skipped",
    )
    db.add(notification_log)
    db.commit()
