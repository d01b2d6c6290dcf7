from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lifecoach.core.config import settings
from lifecoach.db.models.action_log import ActionLog
from lifecoach.db.models.nudge import Nudge
from lifecoach.db.models.user import User
from lifecoach.main import app
from lifecoach.services.notifications import factory, smtp as smtp_module
from lifecoach.services.notifications.base import NotificationError, NotificationResult, NudgeReminderItem
from lifecoach.services.notifications.hooks import send_nudge_reminder_for_user
from lifecoach.services.notifications.noop import NoopNotificationService
from lifecoach.services.notifications.smtp import SmtpNotificationService
from lifecoach.services.notifications.templates import (
    display_name_for,
    reminder_html,
    reminder_subject,
    reminder_text,
)


@pytest.fixture()
def session_factory(monkeypatch):
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def set_fk(conn, record):  # pragma: no cover
        cursor = conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    TestingSession = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    User.__table__.create(bind=engine)
    Nudge.__table__.create(bind=engine)
    ActionLog.__table__.create(bind=engine)

    monkeypatch.setattr(settings, "notifications_enabled", True)
    monkeypatch.setattr(settings, "notifications_provider", "noop")
    monkeypatch.setattr(settings, "nudge_secret_key", "test-secret")
    monkeypatch.setattr(settings, "public_base_url", "https://coach.example.com")
    return TestingSession


class DummyService:
    def __init__(self):
        self.calls = []

    def send_nudge_reminder(self, **kwargs):
        self.calls.append(kwargs)
        return NotificationResult(status="sent", reason="dummy")


def _seed(session, *, email="sam@example.com", name="Sam", nudges=("Stretch",)):
    user = User(id=uuid4(), email=email, name=name)
    session.add(user)
    session.flush()
    for idx, content in enumerate(nudges):
        session.add(
            Nudge(
                user_id=user.id,
                content=content,
                created_at=datetime(2026, 1, 1, 8, idx, tzinfo=timezone.utc),
            )
        )
    session.commit()
    return user


def _last_log(session):
    return (
        session.query(ActionLog)
        .filter(ActionLog.action_type == "notification_nudge_reminder")
        .order_by(ActionLog.created_at.desc())
        .first()
    )


def test_reminder_sends_active_nudges_oldest_first(session_factory, monkeypatch):
    dummy = DummyService()
    monkeypatch.setattr("lifecoach.services.notifications.hooks.get_notification_service", lambda: dummy)
    session = session_factory()
    user = _seed(session, nudges=("First", "Second"))

    result = send_nudge_reminder_for_user(session, user, "req-1")

    assert result.status == "sent"
    call = dummy.calls[0]
    assert call["email"] == "sam@example.com"
    assert call["display_name"] == "Sam"
    assert [item.content for item in call["items"]] == ["First", "Second"]
    assert all(
        item.completion_url.startswith(f"https://coach.example.com/nudges/{item.nudge_id}/complete?sig=")
        for item in call["items"]
    )
    log = _last_log(session)
    assert log.action_payload["result"]["status"] == "sent"
    assert log.action_payload["nudge_count"] == 2
    assert log.action_payload["request_id"] == "req-1"
    session.close()


@pytest.mark.parametrize(
    "email,nudges,reason",
    [(None, ("Stretch",), "no email on file"), ("a@example.com", (), "no active nudges")],
)
def test_reminder_skips_without_email_or_nudges(session_factory, monkeypatch, email, nudges, reason):
    dummy = DummyService()
    monkeypatch.setattr("lifecoach.services.notifications.hooks.get_notification_service", lambda: dummy)
    session = session_factory()
    user = _seed(session, email=email, nudges=nudges)

    result = send_nudge_reminder_for_user(session, user, None)

    assert result.status == "skipped"
    assert result.reason == reason
    assert dummy.calls == []
    assert _last_log(session).action_payload["result"]["reason"] == reason
    session.close()


def test_reminder_skipped_when_notifications_disabled(session_factory, monkeypatch):
    monkeypatch.setattr(settings, "notifications_enabled", False)
    session = session_factory()
    user = _seed(session)

    result = send_nudge_reminder_for_user(session, user, None)

    assert result.status == "skipped"
    assert result.reason == "notifications disabled"
    session.close()


def test_noop_provider_reports_noop():
    result = NoopNotificationService().send_nudge_reminder(
        user_id=uuid4(), email="a@example.com", display_name="A", items=[], request_id=None
    )

    assert result.status == "noop"


def test_factory_falls_back_to_noop(monkeypatch):
    factory.get_notification_service.cache_clear()
    monkeypatch.setattr(settings, "notifications_provider", "carrier-pigeon")
    try:
        assert isinstance(factory.get_notification_service(), NoopNotificationService)
    finally:
        factory.get_notification_service.cache_clear()


def test_factory_builds_smtp(monkeypatch):
    factory.get_notification_service.cache_clear()
    monkeypatch.setattr(settings, "notifications_provider", "SMTP")
    try:
        assert isinstance(factory.get_notification_service(), SmtpNotificationService)
    finally:
        factory.get_notification_service.cache_clear()


def _items(count):
    return [
        NudgeReminderItem(nudge_id=uuid4(), content=f"<Nudge {idx}>", completion_url=f"https://x/{idx}?a=1&b=2")
        for idx in range(count)
    ]


def test_templates():
    assert display_name_for(None) == "there"
    assert display_name_for("  ") == "there"
    assert display_name_for(" Ana ") == "Ana"
    assert reminder_subject("Ana", 1) == "Ana, a gentle nudge from your coach"
    assert reminder_subject("Ana", 3) == "Ana, 3 gentle nudges from your coach"

    items = _items(2)
    text = reminder_text("Ana", items)
    assert "Hi Ana," in text
    assert "Here are the things" in text
    assert "https://x/1?a=1&b=2" in text

    html = reminder_html("Ana", items)
    assert "&lt;Nudge 0&gt;" in html
    assert "https://x/0?a=1&amp;b=2" in html


class _FakeSMTP:
    instances = []

    def __init__(self, host, port):
        self.host = host
        self.port = port
        self.started_tls = False
        self.logged_in = None
        self.sent = []
        _FakeSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.started_tls = True

    def login(self, user, password):
        self.logged_in = (user, password)

    def send_message(self, msg):
        self.sent.append(msg)


def test_smtp_provider_sends_multipart_message(monkeypatch):
    _FakeSMTP.instances = []
    monkeypatch.setattr(smtp_module.smtplib, "SMTP", _FakeSMTP)
    monkeypatch.setattr(settings, "smtp_host", "smtp.example.com")
    monkeypatch.setattr(settings, "smtp_port", 2525)
    monkeypatch.setattr(settings, "smtp_user", "mailer")
    monkeypatch.setattr(settings, "smtp_password", "hunter2")
    monkeypatch.setattr(settings, "smtp_from_email", "coach@example.com")

    result = SmtpNotificationService().send_nudge_reminder(
        user_id=uuid4(), email="ana@example.com", display_name="Ana", items=_items(1), request_id=None
    )

    assert result.status == "sent"
    server = _FakeSMTP.instances[0]
    assert (server.host, server.port) == ("smtp.example.com", 2525)
    assert server.started_tls is True
    assert server.logged_in == ("mailer", "hunter2")
    msg = server.sent[0]
    assert msg["To"] == "ana@example.com"
    assert msg["Subject"] == "Ana, a gentle nudge from your coach"
    assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]


def test_smtp_provider_requires_host(monkeypatch):
    monkeypatch.setattr(settings, "smtp_host", None)

    with pytest.raises(NotificationError):
        SmtpNotificationService().send_nudge_reminder(
            user_id=uuid4(), email="ana@example.com", display_name="Ana", items=_items(1), request_id=None
        )


def test_notifications_config_endpoint(monkeypatch):
    monkeypatch.setattr(settings, "notifications_enabled", True)
    monkeypatch.setattr(settings, "notifications_provider", "smtp")
    with TestClient(app) as test_client:
        resp = test_client.get("/notifications/config")

    assert resp.status_code == 200
    assert resp.json()["enabled"] is True
    assert resp.json()["provider"] == "smtp"
