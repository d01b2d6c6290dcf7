"""Opik SDK client helpers."""
from __future__ import annotations

import logging
from threading import Lock
from typing import Any, Dict, Optional

from opik import Opik

from lifecoach.core.config import settings

logger = logging.getLogger(__name__)

_client: Optional[Opik] = None
_client_lock = Lock()
_init_attempted = False


def init_opik() -> Optional[Opik]:
    """Initialize the Opik client once and return it (None when tracing is off)."""
    global _client, _init_attempted

    with _client_lock:
        if _client is not None or _init_attempted:
            return _client
        _init_attempted = True

    if not settings.opik_enabled:
        return None

    if not settings.opik_api_key:
        logger.warning("OPIK_ENABLED is true but OPIK_API_KEY is missing; skipping Opik init.")
        return None

    try:
        client = Opik(**_client_kwargs())
    except Exception as exc:  # pragma: no cover - network/SDK failure
        logger.warning("Failed to initialize Opik, tracing will be disabled: %s", exc)
        return None

    logger.info("Opik enabled (project=%s, host=%s).", settings.opik_project, settings.opik_host or "default")
    _client = client
    return _client


def _client_kwargs() -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {"project_name": settings.opik_project, "api_key": settings.opik_api_key}
    if settings.opik_workspace:
        kwargs["workspace"] = settings.opik_workspace
    if settings.opik_host:
        kwargs["host"] = settings.opik_host
    return kwargs


def get_opik_client() -> Optional[Opik]:
    """Return the cached Opik client if tracing is enabled."""
    if _client is not None:
        return _client
    return init_opik()


def reset_opik_client() -> None:
    """Forget the cached client so the next call re-reads settings."""
    global _client, _init_attempted
    with _client_lock:
        _client = None
        _init_attempted = False
