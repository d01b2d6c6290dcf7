from __future__ import annotations

from datetime import datetime, timezone
from urllib.parse import urlparse
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lifecoach.core.config import settings
from lifecoach.db.deps import get_db
from lifecoach.db.models.action_log import ActionLog
from lifecoach.db.models.nudge import Nudge
from lifecoach.db.models.user import User
from lifecoach.main import app
from lifecoach.services.nudge_links import generate_completion_url


@pytest.fixture()
def client(monkeypatch):
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

    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)
    User.__table__.create(bind=engine)
    Nudge.__table__.create(bind=engine)
    ActionLog.__table__.create(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    monkeypatch.setattr(settings, "nudge_secret_key", "test-secret")
    monkeypatch.setattr(settings, "public_base_url", "https://coach.example.com")
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal
    app.dependency_overrides.clear()


def _create(test_client, user_id, content="Drink water"):
    return test_client.post("/nudges", json={"user_id": str(user_id), "content": content})


def _complete_link(nudge_id):
    url = urlparse(generate_completion_url(nudge_id, "https://coach.example.com"))
    return f"{url.path}?{url.query}"


def test_create_nudge(client):
    test_client, _ = client

    resp = _create(test_client, uuid4(), content="  Call mom  ")

    assert resp.status_code == 201
    nudge = resp.json()["nudge"]
    assert nudge["content"] == "Call mom"
    assert nudge["is_completed"] is False
    assert nudge["completed_at"] is None


@pytest.mark.parametrize("content", ["", "   ", "x" * 151])
def test_create_nudge_validates_content(client, content):
    test_client, _ = client

    resp = _create(test_client, uuid4(), content=content)

    assert resp.status_code == 422


def test_list_nudges_hides_completed_by_default(client):
    test_client, session_factory = client
    user_id = uuid4()
    session = session_factory()
    session.add(User(id=user_id))
    session.flush()
    session.add_all(
        [
            Nudge(user_id=user_id, content="Old", created_at=datetime(2026, 1, 1, tzinfo=timezone.utc)),
            Nudge(user_id=user_id, content="New", created_at=datetime(2026, 1, 2, tzinfo=timezone.utc)),
            Nudge(
                user_id=user_id,
                content="Done",
                is_completed=True,
                completed_at=datetime(2026, 1, 3, tzinfo=timezone.utc),
                created_at=datetime(2026, 1, 3, tzinfo=timezone.utc),
            ),
        ]
    )
    session.commit()
    session.close()

    active = test_client.get("/nudges", params={"user_id": str(user_id)}).json()
    assert [item["content"] for item in active["nudges"]] == ["New", "Old"]
    assert active["active_count"] == 2

    everything = test_client.get("/nudges", params={"user_id": str(user_id), "completed": "true"}).json()
    assert [item["content"] for item in everything["nudges"]] == ["Done", "New", "Old"]
    assert everything["active_count"] == 2


def test_complete_nudge_in_app(client):
    test_client, session_factory = client
    user_id = uuid4()
    nudge_id = _create(test_client, user_id).json()["nudge"]["id"]

    resp = test_client.patch(f"/nudges/{nudge_id}", json={"user_id": str(user_id)})

    assert resp.status_code == 200
    assert resp.json()["nudge"]["is_completed"] is True
    assert resp.json()["nudge"]["completed_at"]

    again = test_client.patch(f"/nudges/{nudge_id}", json={"user_id": str(user_id)})
    assert again.status_code == 400
    assert again.json()["detail"] == "Nudge already completed"

    session = session_factory()
    logs = session.query(ActionLog).filter(ActionLog.action_type == "nudge_completed").all()
    session.close()
    assert len(logs) == 1
    assert logs[0].action_payload["source"] == "app"


def test_complete_nudge_ownership(client):
    test_client, _ = client
    nudge_id = _create(test_client, uuid4()).json()["nudge"]["id"]

    assert test_client.patch(f"/nudges/{nudge_id}", json={"user_id": str(uuid4())}).status_code == 403
    assert test_client.patch(f"/nudges/{uuid4()}", json={"user_id": str(uuid4())}).status_code == 404


def test_email_link_completes_nudge(client):
    test_client, session_factory = client
    nudge_id = _create(test_client, uuid4()).json()["nudge"]["id"]
    link = _complete_link(nudge_id)

    resp = test_client.get(link, follow_redirects=False)

    assert resp.status_code == 307
    assert resp.headers["location"] == "https://coach.example.com/?nudge=completed"

    second = test_client.get(link, follow_redirects=False)
    assert second.headers["location"] == "https://coach.example.com/?nudge=already-completed"

    session = session_factory()
    log = session.query(ActionLog).filter(ActionLog.action_type == "nudge_completed").one()
    session.close()
    assert log.action_payload["source"] == "email_link"


def test_email_link_missing_params(client):
    test_client, _ = client

    resp = test_client.get(f"/nudges/{uuid4()}/complete", follow_redirects=False)

    assert resp.headers["location"] == "https://coach.example.com/?error=invalid-link"


def test_email_link_bad_signature(client):
    test_client, _ = client
    nudge_id = _create(test_client, uuid4()).json()["nudge"]["id"]
    expires = str(int(datetime.now(timezone.utc).timestamp() * 1000) + 60_000)

    resp = test_client.get(
        f"/nudges/{nudge_id}/complete",
        params={"sig": "0" * 64, "expires": expires},
        follow_redirects=False,
    )

    assert resp.headers["location"] == "https://coach.example.com/?error=expired-link"


def test_email_link_garbled_expiry(client):
    test_client, _ = client

    resp = test_client.get(
        f"/nudges/{uuid4()}/complete",
        params={"sig": "abc", "expires": "soon"},
        follow_redirects=False,
    )

    assert resp.headers["location"] == "https://coach.example.com/?error=verification-failed"


def test_email_link_for_deleted_nudge(client):
    test_client, _ = client
    missing_id = uuid4()

    resp = test_client.get(_complete_link(missing_id), follow_redirects=False)

    assert resp.headers["location"] == "https://coach.example.com/?error=nudge-not-found"


def test_email_link_with_malformed_id_redirects(client):
    test_client, _ = client

    resp = test_client.get(
        "/nudges/not-a-uuid/complete",
        params={"sig": "abc", "expires": "123"},
        follow_redirects=False,
    )

    assert resp.status_code == 307
    assert resp.headers["location"] == "https://coach.example.com/?error=expired-link"


def test_email_link_signed_for_malformed_id(client):
    test_client, _ = client

    resp = test_client.get(_complete_link("not-a-uuid"), follow_redirects=False)

    assert resp.status_code == 307
    assert resp.headers["location"] == "https://coach.example.com/?error=nudge-not-found"
