"""Tests ensuring observability wiring is safe by default."""
from __future__ import annotations

import importlib

import pytest

from brightlight.core.errors import StructureValidationError
from brightlight.observability import tracing


class _DummyTrace:
    def __init__(self, name, metadata=None):
        self.name = name
        self.metadata = metadata or {}
        self.error_info = None
        self.ended = False

    def update(self, error_info=None, metadata=None, **kwargs):
        if error_info is not None:
            self.error_info = error_info
        if metadata is not None:
            self.metadata = dict(metadata)

    def end(self):
        self.ended = True


class _DummyOpik:
    def __init__(self):
        self.traces = []

    def trace(self, name, metadata=None):
        trace = _DummyTrace(name, metadata)
        self.traces.append(trace)
        return trace


def test_app_import_succeeds_when_opik_is_disabled(monkeypatch) -> None:
    monkeypatch.setenv("OPIK_ENABLED", "false")
    monkeypatch.delenv("OPIK_API_KEY", raising=False)

    import brightlight.main as main_module

    reloaded = importlib.reload(main_module)

    assert hasattr(reloaded, "app")


def test_trace_yields_none_when_disabled(monkeypatch) -> None:
    monkeypatch.setattr(tracing, "get_opik_client", lambda: None)

    with tracing.trace("plan.current", metadata={"route": "/plan"}) as opik_trace:
        assert opik_trace is None


def test_trace_records_metadata_and_ends(monkeypatch) -> None:
    dummy = _DummyOpik()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy)

    with tracing.trace("plan.today", metadata={"route": "/plan/today", "empty": None}, user_id="u-1", request_id="r-1"):
        pass

    recorded = dummy.traces[0]
    duration = recorded.metadata.pop("duration_ms")
    assert recorded.name == "plan.today"
    assert recorded.metadata == {"route": "/plan/today", "user_id": "u-1", "request_id": "r-1"}
    assert duration >= 0
    assert recorded.ended is True


def test_trace_attaches_error_info_and_reraises(monkeypatch) -> None:
    dummy = _DummyOpik()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy)

    with pytest.raises(RuntimeError):
        with tracing.trace("wellness_plan.generate"):
            raise RuntimeError("completion endpoint down")

    recorded = dummy.traces[0]
    assert recorded.error_info == {"exception_type": "RuntimeError", "message": "completion endpoint down"}
    assert recorded.ended is True


def test_trace_marks_service_errors(monkeypatch) -> None:
    dummy = _DummyOpik()
    monkeypatch.setattr(tracing, "get_opik_client", lambda: dummy)

    with pytest.raises(StructureValidationError):
        with tracing.trace("wellness_plan.generate"):
            raise StructureValidationError(1, 14)

    assert dummy.traces[0].error_info["exception_type"] == "StructureValidationError"
    assert dummy.traces[0].error_info["brightlight_error"] is True
