"""No-op notification provider (logs only)."""
from __future__ import annotations

import logging
from typing import List
from uuid import UUID

from lifecoach.services.notifications.base import NotificationResult, NotificationService, NudgeReminderItem


logger = logging.getLogger(__name__)


class NoopNotificationService(NotificationService):
    def send_nudge_reminder(
        self,
        *,
        user_id: UUID,
        email: str,
        display_name: str,
        items: List[NudgeReminderItem],
        request_id: str | None,
    ) -> NotificationResult:
        logger.info(
            "Notification queued (noop) nudge_reminder user=%s nudges=%s",
            user_id,
            len(items),
        )
        return NotificationResult(status="noop", reason="notification provider is noop")
