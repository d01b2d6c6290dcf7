"""Tests ensuring observability wiring is safe by default."""
from __future__ import annotations

import importlib


def test_app_import_succeeds_when_opik_is_disabled(monkeypatch) -> None:
    monkeypatch.setenv("OPIK_ENABLED", "false")
    monkeypatch.delenv("OPIK_API_KEY", raising=False)

    import lifecoach.core.config as core_config
    import lifecoach.observability.client as client_module
    import lifecoach.main as main_module

    importlib.reload(core_config)
    importlib.reload(client_module)
    reloaded_app = importlib.reload(main_module)

    assert hasattr(reloaded_app, "app")


def test_trace_is_noop_without_client(monkeypatch) -> None:
    from lifecoach.observability import tracing

    monkeypatch.setattr(tracing, "get_opik_client", lambda: None)

    with tracing.trace("noop", metadata={"k": "v"}) as span:
        assert span is None


def test_init_opik_skips_without_api_key(monkeypatch) -> None:
    from lifecoach.observability import client as client_module

    monkeypatch.setattr(client_module.settings, "opik_enabled", True)
    monkeypatch.setattr(client_module.settings, "opik_api_key", None)
    client_module.reset_opik_client()
    try:
        assert client_module.init_opik() is None
    finally:
        client_module.reset_opik_client()


def test_opik_client_kwargs_include_optional_workspace(monkeypatch) -> None:
    from lifecoach.observability import client as client_module

    monkeypatch.setattr(client_module.settings, "opik_api_key", "key")
    monkeypatch.setattr(client_module.settings, "opik_workspace", "coaching")
    monkeypatch.setattr(client_module.settings, "opik_host", None)

    kwargs = client_module._client_kwargs()

    assert kwargs["workspace"] == "coaching"
    assert kwargs["api_key"] == "key"
    assert "host" not in kwargs
