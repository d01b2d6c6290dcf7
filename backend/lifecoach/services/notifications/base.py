"""Notification service interface."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List
from uuid import UUID


@dataclass
class NotificationResult:
    status: str
    reason: str


@dataclass
class NudgeReminderItem:
    nudge_id: UUID
    content: str
    completion_url: str


class NotificationService:
    """Base interface for notification providers."""

    def send_nudge_reminder(
        self,
        *,
        user_id: UUID,
        email: str,
        display_name: str,
        items: List[NudgeReminderItem],
        request_id: str | None,
    ) -> NotificationResult:
        raise NotImplementedError


class NotificationError(RuntimeError):
    """Raised by providers when a message could not be delivered."""
