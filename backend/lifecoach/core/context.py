"""Per-request (and per-job) context."""
from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator
from uuid import uuid4

request_id_ctx_var: ContextVar[str | None] = ContextVar("request_id", default=None)


def get_request_id() -> str | None:
    return request_id_ctx_var.get()


def new_request_id(prefix: str | None = None) -> str:
    """Fresh id; scheduled jobs use a prefix such as ``job:nudge_reminder``."""
    value = str(uuid4())
    return f"{prefix}:{value}" if prefix else value


@contextmanager
def bind_request_id(request_id: str) -> Iterator[str]:
    """Make ``request_id`` visible to logging and tracing for the block."""
    token = request_id_ctx_var.set(request_id)
    try:
        yield request_id
    finally:
        request_id_ctx_var.reset(token)
