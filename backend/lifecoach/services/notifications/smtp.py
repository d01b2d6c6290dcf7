"""SMTP notification provider."""
from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import List
from uuid import UUID

from lifecoach.core.config import settings
from lifecoach.services.notifications.base import (
    NotificationError,
    NotificationResult,
    NotificationService,
    NudgeReminderItem,
)
from lifecoach.services.notifications.templates import reminder_html, reminder_subject, reminder_text


logger = logging.getLogger(__name__)


class SmtpNotificationService(NotificationService):
    """Deliver reminder e-mails through an authenticated STARTTLS SMTP relay."""

    def send_nudge_reminder(
        self,
        *,
        user_id: UUID,
        email: str,
        display_name: str,
        items: List[NudgeReminderItem],
        request_id: str | None,
    ) -> NotificationResult:
        if not items:
            return NotificationResult(status="skipped", reason="no active nudges")
        if not settings.smtp_host or not settings.smtp_from_email:
            raise NotificationError("SMTP_HOST and SMTP_FROM_EMAIL must be set for the smtp provider")

        msg = MIMEMultipart("alternative")
        msg["Subject"] = reminder_subject(display_name, len(items))
        msg["From"] = settings.smtp_from_email
        msg["To"] = email
        msg.attach(MIMEText(reminder_text(display_name, items), "plain"))
        msg.attach(MIMEText(reminder_html(display_name, items), "html"))

        logger.info("Sending nudge reminder user=%s nudges=%s via %s", user_id, len(items), settings.smtp_host)
        try:
            with smtplib.SMTP(settings.smtp_host, settings.smtp_port) as server:
                server.starttls()
                if settings.smtp_user and settings.smtp_password:
                    server.login(settings.smtp_user, settings.smtp_password)
                server.send_message(msg)
        except smtplib.SMTPAuthenticationError as exc:
            raise NotificationError(f"SMTP authentication failed: {exc}") from exc
        except (smtplib.SMTPException, OSError) as exc:
            raise NotificationError(f"SMTP delivery failed: {exc}") from exc

        return NotificationResult(status="sent", reason=f"{len(items)} nudge(s) e-mailed")
