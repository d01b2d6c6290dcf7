from __future__ import annotations

from urllib.parse import parse_qs, urlparse
from uuid import uuid4

import pytest

from lifecoach.core.config import settings
from lifecoach.core.errors import NudgeLinkError
from lifecoach.services.nudge_links import generate_completion_url, verify_completion_url

NOW_MS = 1_760_000_000_000
DAY_MS = 24 * 60 * 60 * 1000


@pytest.fixture(autouse=True)
def secret(monkeypatch):
    monkeypatch.setattr(settings, "nudge_secret_key", "test-secret")
    monkeypatch.setattr(settings, "nudge_link_ttl_days", 7)


def _params(url):
    parsed = urlparse(url)
    query = parse_qs(parsed.query)
    return parsed, query["sig"][0], query["expires"][0]


def test_generated_url_shape():
    nudge_id = uuid4()

    url = generate_completion_url(nudge_id, "https://coach.example.com/", now_ms=NOW_MS)

    parsed, sig, expires = _params(url)
    assert parsed.netloc == "coach.example.com"
    assert parsed.path == f"/nudges/{nudge_id}/complete"
    assert int(expires) == NOW_MS + 7 * DAY_MS
    assert len(sig) == 64


def test_valid_link_verifies():
    nudge_id = uuid4()
    _, sig, expires = _params(generate_completion_url(nudge_id, "https://x", now_ms=NOW_MS))

    assert verify_completion_url(nudge_id, sig, expires, now_ms=NOW_MS + DAY_MS) is True


def test_expired_link_fails():
    nudge_id = uuid4()
    _, sig, expires = _params(generate_completion_url(nudge_id, "https://x", now_ms=NOW_MS))

    assert verify_completion_url(nudge_id, sig, expires, now_ms=NOW_MS + 8 * DAY_MS) is False


def test_signature_is_bound_to_nudge_and_expiry():
    nudge_id = uuid4()
    _, sig, expires = _params(generate_completion_url(nudge_id, "https://x", now_ms=NOW_MS))

    assert verify_completion_url(uuid4(), sig, expires, now_ms=NOW_MS) is False
    assert verify_completion_url(nudge_id, sig, str(int(expires) + 1), now_ms=NOW_MS) is False
    assert verify_completion_url(nudge_id, sig[:-2], expires, now_ms=NOW_MS) is False
    assert verify_completion_url(nudge_id, "é" * 64, expires, now_ms=NOW_MS) is False


def test_non_numeric_expiry_raises():
    with pytest.raises(NudgeLinkError):
        verify_completion_url(uuid4(), "abc", "tomorrow", now_ms=NOW_MS)


def test_missing_secret_raises(monkeypatch):
    monkeypatch.setattr(settings, "nudge_secret_key", None)

    with pytest.raises(NudgeLinkError):
        generate_completion_url(uuid4(), "https://x", now_ms=NOW_MS)
