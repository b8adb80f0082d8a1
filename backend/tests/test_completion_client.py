from __future__ import annotations

from typing import Any, Dict, List

import pytest

from brightlight.core.errors import TransportError, UpstreamError
from brightlight.services.completion_client import SYSTEM_ROLE_PROMPT, TextCompletionClient, decode_completion


def _success(text: str) -> Dict[str, Any]:
    return {"id": "chatcmpl-1", "choices": [{"index": 0, "message": {"role": "assistant", "content": text}}]}


def _failure(message: str = "Rate limit reached") -> Dict[str, Any]:
    return {"error": {"message": message, "type": "rate_limit_error", "param": None, "code": 429}}


class _ScriptedTransport:
    def __init__(self, outcomes: List[Any]):
        self._outcomes = list(outcomes)
        self.bodies: List[Dict[str, Any]] = []

    def send(self, body: Dict[str, Any]) -> Dict[str, Any]:
        self.bodies.append(body)
        outcome = self._outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def _client(transport: _ScriptedTransport, sleeps: List[float], **kwargs) -> TextCompletionClient:
    return TextCompletionClient(transport, model="gpt-test", retry_delay=0.5, sleep=sleeps.append, **kwargs)


def test_complete_sends_system_and_user_messages() -> None:
    transport = _ScriptedTransport([_success("Day 1:")])

    assert _client(transport, []).complete("Plan please") == "Day 1:"
    assert transport.bodies[0] == {
        "model": "gpt-test",
        "messages": [
            {"role": "system", "content": SYSTEM_ROLE_PROMPT},
            {"role": "user", "content": "Plan please"},
        ],
    }


def test_two_failures_then_success_returns_result() -> None:
    sleeps: List[float] = []
    transport = _ScriptedTransport([_failure(), TransportError("reset"), _success("ok")])

    assert _client(transport, sleeps).complete("hi") == "ok"
    assert len(transport.bodies) == 3
    assert sleeps == [0.5, 0.5]


def test_four_failures_surface_upstream_error() -> None:
    sleeps: List[float] = []
    transport = _ScriptedTransport([_failure()] * 4)

    with pytest.raises(UpstreamError) as exc_info:
        _client(transport, sleeps).complete("hi")

    assert len(transport.bodies) == 4
    assert sleeps == [0.5, 0.5, 0.5]
    assert exc_info.value.error_type == "rate_limit_error"
    assert exc_info.value.code == "429"


def test_transport_failures_exhausted_become_upstream_error() -> None:
    transport = _ScriptedTransport([TransportError("unreachable")] * 4)

    with pytest.raises(UpstreamError):
        _client(transport, []).complete("hi")


def test_cache_returns_memoised_text() -> None:
    transport = _ScriptedTransport([_success("first")])
    client = _client(transport, [], cache_enabled=True)

    assert client.complete("same") == "first"
    assert client.complete("same") == "first"
    assert len(transport.bodies) == 1


def test_decode_prefers_error_schema() -> None:
    with pytest.raises(UpstreamError) as exc_info:
        decode_completion({"error": {"message": "Invalid key", "type": "invalid_request_error"}, "choices": []})

    assert exc_info.value.message == "Invalid key"


def test_decode_without_choices_is_empty_text() -> None:
    assert decode_completion({"choices": []}) == ""


def test_decode_rejects_unknown_payload() -> None:
    with pytest.raises(UpstreamError):
        decode_completion({"unexpected": True})


def test_bypassing_cache_refreshes_memo() -> None:
    transport = _ScriptedTransport([_success("stale"), _success("fresh")])
    client = _client(transport, [], cache_enabled=True)

    client.complete("same")

    assert client.complete("same", use_cache=False) == "fresh"
    assert client.complete("same") == "fresh"
    assert len(transport.bodies) == 2
