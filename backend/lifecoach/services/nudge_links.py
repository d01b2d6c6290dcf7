"""Signed one-click completion links for nudge reminder e-mails."""
from __future__ import annotations

import hashlib
import hmac
import time
from typing import Optional
from urllib.parse import urlencode
from uuid import UUID

from lifecoach.core.config import settings
from lifecoach.core.errors import NudgeLinkError

_MS_PER_DAY = 24 * 60 * 60 * 1000


def generate_completion_url(nudge_id: UUID | str, base_url: str, *, now_ms: Optional[int] = None) -> str:
    """Return ``{base_url}/nudges/{id}/complete?sig=...&expires=...``.

    ``expires`` is a millisecond Unix timestamp ``nudge_link_ttl_days`` ahead.
    """
    now_ms = _now_ms() if now_ms is None else now_ms
    expires = now_ms + settings.nudge_link_ttl_days * _MS_PER_DAY
    signature = _sign(str(nudge_id), expires)
    query = urlencode({"sig": signature, "expires": expires})
    return f"{base_url.rstrip('/')}/nudges/{nudge_id}/complete?{query}"


def verify_completion_url(
    nudge_id: UUID | str,
    signature: str,
    expires: str,
    *,
    now_ms: Optional[int] = None,
) -> bool:
    """Check a completion link; False when expired or tampered with.

    Raises NudgeLinkError when no secret is configured or ``expires`` is not a number.
    """
    try:
        expires_ms = int(expires)
    except (TypeError, ValueError) as exc:
        raise NudgeLinkError("expires must be a millisecond timestamp") from exc

    now_ms = _now_ms() if now_ms is None else now_ms
    if now_ms > expires_ms:
        return False

    expected = _sign(str(nudge_id), expires_ms)
    if len(signature) != len(expected):
        return False
    return hmac.compare_digest(signature.lower().encode("utf-8"), expected.encode("utf-8"))


def _sign(nudge_id: str, expires_ms: int) -> str:
    secret = settings.nudge_secret_key
    if not secret:
        raise NudgeLinkError("NUDGE_SECRET_KEY is not configured")
    message = f"{nudge_id}-{expires_ms}".encode("utf-8")
    return hmac.new(secret.encode("utf-8"), message, hashlib.sha256).hexdigest()


def _now_ms() -> int:
    return int(time.time() * 1000)
