"""Notification service factory."""
from __future__ import annotations

import logging
from functools import lru_cache

from lifecoach.core.config import settings
from lifecoach.services.notifications.base import NotificationService
from lifecoach.services.notifications.noop import NoopNotificationService
from lifecoach.services.notifications.smtp import SmtpNotificationService

logger = logging.getLogger(__name__)


@lru_cache
def get_notification_service() -> NotificationService:
    provider = settings.notifications_provider.lower()
    if provider == "smtp":
        return SmtpNotificationService()
    if provider != "noop":
        logger.warning("Unknown notifications provider %r; falling back to noop", provider)
    return NoopNotificationService()
