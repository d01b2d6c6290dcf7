"""Tracing utilities wrapping Opik."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Dict, Iterator, Optional

from lifecoach.core.context import get_request_id
from lifecoach.observability.client import get_opik_client

if TYPE_CHECKING:  # pragma: no cover - typing helper
    from opik.api_objects.trace.trace_client import Trace
else:  # pragma: no cover - typing helper
    Trace = object  # type: ignore[assignment]

logger = logging.getLogger(__name__)


def _trace_metadata(
    metadata: Optional[Dict[str, Any]],
    user_id: Optional[str],
    request_id: Optional[str],
) -> Optional[Dict[str, Any]]:
    merged = {key: value for key, value in (metadata or {}).items() if value is not None}
    if user_id:
        merged.setdefault("user_id", str(user_id))
    # Fall back to the bound id so service-level spans inside a request or job line up.
    request_id = request_id or get_request_id()
    if request_id:
        merged.setdefault("request_id", request_id)
    return merged or None


def _safely(action: str, name: str, fn, *args, **kwargs) -> None:
    try:
        fn(*args, **kwargs)
    except Exception:  # pragma: no cover - SDK failure
        logger.debug("Failed to %s Opik trace %s", action, name, exc_info=True)


@contextmanager
def trace(
    name: str,
    metadata: Optional[Dict[str, Any]] = None,
    user_id: Optional[str] = None,
    request_id: Optional[str] = None,
) -> Iterator[Optional["Trace"]]:
    """
    Open an Opik trace for the block and yield it (None when tracing is off).

    Exceptions raised inside the block are attached to the trace and re-raised.
    """
    client = get_opik_client()
    opik_trace: Optional["Trace"] = None

    if client:
        try:
            opik_trace = client.trace(name=name, metadata=_trace_metadata(metadata, user_id, request_id))
        except Exception as exc:  # pragma: no cover - SDK failure
            logger.debug("Unable to start Opik trace %s: %s", name, exc)

    try:
        yield opik_trace
    except Exception as exc:
        if opik_trace:
            _safely("attach error info to", name, opik_trace.update, error_info={"message": str(exc)})
        raise
    finally:
        if opik_trace:
            _safely("close", name, opik_trace.end)
