from __future__ import annotations

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from lifecoach.db.deps import get_db
from lifecoach.db.models.activity import Activity
from lifecoach.db.models.user import User
from lifecoach.main import app


@pytest.fixture()
def client():
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
    Activity.__table__.create(bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client, TestingSessionLocal
    app.dependency_overrides.clear()


def _create(test_client, user_id, name="Meditate", priority="high", effort_level="low"):
    return test_client.post(
        "/activities",
        json={"user_id": str(user_id), "name": name, "priority": priority, "effort_level": effort_level},
    )


def test_create_activity_creates_user_and_returns_row(client):
    test_client, session_factory = client
    user_id = uuid4()

    resp = _create(test_client, user_id, name="  Journal  ")

    assert resp.status_code == 201
    body = resp.json()
    assert body["activity"]["name"] == "Journal"
    assert body["activity"]["priority"] == "high"
    assert body["activity"]["effort_level"] == "low"
    assert body["request_id"]

    session = session_factory()
    assert session.get(User, user_id) is not None
    assert session.query(Activity).count() == 1
    session.close()


def test_create_activity_rejects_unknown_enum(client):
    test_client, _ = client

    resp = _create(test_client, uuid4(), priority="urgent")

    assert resp.status_code == 422


def test_create_activity_rejects_blank_name(client):
    test_client, _ = client

    resp = _create(test_client, uuid4(), name="   ")

    assert resp.status_code == 422


def test_list_activities_scoped_to_user(client):
    test_client, _ = client
    user_id = uuid4()
    _create(test_client, user_id, name="Walk")
    _create(test_client, user_id, name="Read")
    _create(test_client, uuid4(), name="Someone else")

    resp = test_client.get("/activities", params={"user_id": str(user_id)})

    assert resp.status_code == 200
    names = {item["name"] for item in resp.json()["activities"]}
    assert names == {"Walk", "Read"}


def test_update_activity(client):
    test_client, _ = client
    user_id = uuid4()
    activity_id = _create(test_client, user_id).json()["activity"]["id"]

    resp = test_client.put(
        f"/activities/{activity_id}",
        json={"user_id": str(user_id), "name": "Stretch", "priority": "low", "effort_level": "medium"},
    )

    assert resp.status_code == 200
    activity = resp.json()["activity"]
    assert activity["name"] == "Stretch"
    assert activity["priority"] == "low"
    assert activity["effort_level"] == "medium"


def test_update_other_users_activity_forbidden(client):
    test_client, _ = client
    activity_id = _create(test_client, uuid4()).json()["activity"]["id"]

    resp = test_client.put(
        f"/activities/{activity_id}",
        json={"user_id": str(uuid4()), "name": "Hijack", "priority": "low", "effort_level": "low"},
    )

    assert resp.status_code == 403


def test_update_missing_activity_not_found(client):
    test_client, _ = client

    resp = test_client.put(
        f"/activities/{uuid4()}",
        json={"user_id": str(uuid4()), "name": "Ghost", "priority": "low", "effort_level": "low"},
    )

    assert resp.status_code == 404


def test_delete_activity(client):
    test_client, session_factory = client
    user_id = uuid4()
    activity_id = _create(test_client, user_id).json()["activity"]["id"]

    forbidden = test_client.delete(f"/activities/{activity_id}", params={"user_id": str(uuid4())})
    assert forbidden.status_code == 403

    resp = test_client.delete(f"/activities/{activity_id}", params={"user_id": str(user_id)})
    assert resp.status_code == 200
    assert resp.json()["message"] == "Activity deleted successfully"

    session = session_factory()
    assert session.query(Activity).count() == 0
    session.close()
