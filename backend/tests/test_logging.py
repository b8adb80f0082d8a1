from __future__ import annotations

import logging

from brightlight.core.context import request_id_ctx_var
from brightlight.core.logging import QUIET_LOGGERS, RequestIdFilter, build_logging_config


def test_config_quiets_http_clients_and_uppercases_level() -> None:
    config = build_logging_config("debug")

    assert config["root"]["level"] == "DEBUG"
    assert config["handlers"]["stderr"]["level"] == "DEBUG"
    assert {name: config["loggers"][name]["level"] for name in QUIET_LOGGERS} == {
        "httpx": "WARNING",
        "httpcore": "WARNING",
        "openai": "WARNING",
    }


def test_filter_stamps_current_request_id() -> None:
    record = logging.LogRecord("brightlight", logging.INFO, __file__, 1, "hello", None, None)
    token = request_id_ctx_var.set("req-77")
    try:
        RequestIdFilter().filter(record)
    finally:
        request_id_ctx_var.reset(token)

    assert record.request_id == "req-77"


def test_filter_uses_dash_outside_requests() -> None:
    record = logging.LogRecord("brightlight", logging.INFO, __file__, 1, "hello", None, None)

    RequestIdFilter().filter(record)

    assert record.request_id == "-"
