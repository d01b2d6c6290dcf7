"""Tests for metrics and tracing helpers."""
from __future__ import annotations

from typing import Any, Dict

import pytest

from lifecoach.observability import metrics
from lifecoach.observability import tracing


class _DummyTrace:
    def __init__(self, metadata: Dict[str, Any]):
        self.metadata = metadata
        self.ended = False
        self.error_info = None

    def update(self, error_info=None, **kwargs) -> None:
        self.error_info = error_info

    def end(self) -> None:
        self.ended = True


class _DummyClient:
    def __init__(self):
        self.traces: list[_DummyTrace] = []

    def trace(self, name: str, metadata: Dict[str, Any] | None = None):
        trace = _DummyTrace(metadata or {})
        self.traces.append(trace)
        return trace


def test_log_metric_closes_trace(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    metrics.log_metric("coach.suggest.success", 1, metadata={"energy_level": "high"})

    assert dummy_client.traces, "Metric call should record a trace"
    assert dummy_client.traces[0].metadata["value"] == 1
    assert dummy_client.traces[0].metadata["energy_level"] == "high"
    assert dummy_client.traces[0].ended is True


def test_trace_records_error_and_reraises(monkeypatch) -> None:
    dummy_client = _DummyClient()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy_client)

    with pytest.raises(RuntimeError):
        with tracing.trace("coach.suggest", user_id="u1", request_id="r1"):
            raise RuntimeError("boom")

    recorded = dummy_client.traces[0]
    assert recorded.metadata == {"user_id": "u1", "request_id": "r1"}
    assert recorded.error_info == {"message": "boom"}
    assert recorded.ended is True
