"""Structured log output."""

import json

import structlog

from confreview.core.logging import configure_logger, get_logger


def test_json_logs_carry_event_and_context(capsys):
    configure_logger("INFO", json_logs=True)
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(request_id="req-1")
    try:
        get_logger("confreview.tests").info("bid_placed", bid_id="b1")
    finally:
        structlog.contextvars.clear_contextvars()

    line = capsys.readouterr().out.strip().splitlines()[-1]
    payload = json.loads(line)
    assert payload["event"] == "bid_placed"
    assert payload["level"] == "info"
    assert payload["logger"] == "confreview.tests"
    assert payload["bid_id"] == "b1"
    assert payload["request_id"] == "req-1"


def test_debug_is_filtered_at_info_level(capsys):
    configure_logger("INFO", json_logs=True)
    get_logger("confreview.tests.quiet").debug("noise")
    assert "noise" not in capsys.readouterr().out
