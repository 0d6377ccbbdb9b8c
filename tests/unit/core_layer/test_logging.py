"""
Unit Tests for Logging Module

Tests the structlog processors and request id context management.
"""

import os

import pytest

from sre_monitor.core.logging.logger import (
    add_log_level_name,
    add_process_info,
    add_request_id,
    add_timestamp,
    clear_request_id,
    get_logger,
    get_request_id,
    log_stage,
    set_request_id,
    setup_logging,
)


@pytest.fixture(autouse=True)
def _reset_request_id():
    yield
    clear_request_id()


@pytest.mark.unit
class TestRequestIdContext:
    def test_set_and_get(self):
        set_request_id("abc123")
        assert get_request_id() == "abc123"

    def test_clear(self):
        set_request_id("abc123")
        clear_request_id()
        assert get_request_id() is None

    def test_last_set_wins(self):
        set_request_id("first")
        set_request_id("second")
        assert get_request_id() == "second"


@pytest.mark.unit
class TestProcessors:
    def test_add_request_id_when_set(self):
        set_request_id("req-1")
        event = add_request_id(None, "info", {"event": "x"})
        assert event["request_id"] == "req-1"

    def test_add_request_id_keeps_explicit_value(self):
        set_request_id("req-1")
        event = add_request_id(None, "info", {"event": "x", "request_id": "explicit"})
        assert event["request_id"] == "explicit"

    def test_add_request_id_without_context(self):
        event = add_request_id(None, "info", {"event": "x"})
        assert "request_id" not in event

    def test_add_timestamp_is_utc_iso(self):
        event = add_timestamp(None, "info", {"event": "x"})
        assert event["timestamp"].endswith("Z")
        assert "T" in event["timestamp"]

    def test_add_process_info(self):
        event = add_process_info(None, "info", {"event": "x"})
        assert event["pid"] == os.getpid()
        assert event["hostname"]

    def test_add_log_level_name_uppercases(self):
        assert add_log_level_name(None, "info", {"level": "warning"})["level"] == "WARNING"

    def test_add_log_level_name_without_level(self):
        assert add_log_level_name(None, "info", {"event": "x"}) == {"event": "x"}


@pytest.mark.unit
class TestLoggerUsage:
    @pytest.mark.parametrize("log_format", ["json", "console"])
    def test_setup_logging_accepts_both_formats(self, log_format):
        setup_logging(log_level="DEBUG", log_format=log_format)
        get_logger(__name__).info("configured", log_format=log_format)

    def test_log_stage_passes_stage_field(self):
        calls = []

        class Recorder:
            def warning(self, message, **kwargs):
                calls.append((message, kwargs))

        log_stage(Recorder(), "1.0_RATE_LIMITING", "Rejected", level="WARNING", client="a")

        assert calls == [("Rejected", {"stage": "1.0_RATE_LIMITING", "client": "a"})]
