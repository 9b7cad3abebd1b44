"""Tests for the logging helpers with correlation and session ids."""

import logging
import sys
from typing import Any, cast

from pythonjsonlogger import jsonlogger

from train_traffic_engine.core.logging import (
    LOG_SCHEMA_VERSION,
    CorrelationIdFilter,
    VersionedJsonFormatter,
    bind_correlation_id,
    bind_session_id,
    correlation_id_context,
    get_correlation_id,
    get_logger,
    get_request_id,
    get_session_id,
    reset_correlation_id,
    request_id_context,
    reset_session_id,
    session_id_context,
)


def _record() -> logging.LogRecord:
    return logging.LogRecord(
        name="test",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="hello",
        args=None,
        exc_info=None,
    )


def test_correlation_filter_attaches_context():
    """Filter should attach the current correlation and session ids onto log records."""
    cid_token = bind_correlation_id("req-123")
    session_token = bind_session_id("session-abc")
    try:
        record = _record()
        assert CorrelationIdFilter().filter(record) is True
        record_any = cast(Any, record)
        assert record_any.__dict__["correlation_id"] == "req-123"
        assert record_any.__dict__["session_id"] == "session-abc"
        assert record_any.__dict__["request_id"] == "-"
    finally:
        reset_session_id(session_token)
        reset_correlation_id(cid_token)


def test_filter_uses_placeholder_when_unbound():
    record = _record()
    CorrelationIdFilter().filter(record)
    assert cast(Any, record).__dict__["correlation_id"] == "-"
    assert cast(Any, record).__dict__["session_id"] == "-"


def test_context_managers_restore_state():
    """Nested contexts restore the original ids."""
    with correlation_id_context("outer"), session_id_context("s-1"):
        with correlation_id_context("inner"):
            assert get_correlation_id() == "inner"
        assert get_correlation_id() == "outer"
        assert get_session_id() == "s-1"
    assert get_correlation_id() is None
    assert get_session_id() is None


def test_request_id_is_tracked_apart_from_correlation_id():
    """The platform request id gets its own field and leaves the correlation id alone."""
    with correlation_id_context("http-cid"), request_id_context("amzn-req-1"):
        record = _record()
        CorrelationIdFilter().filter(record)
        fields = cast(Any, record).__dict__
        assert fields["correlation_id"] == "http-cid"
        assert fields["request_id"] == "amzn-req-1"
        assert get_request_id() == "amzn-req-1"
    assert get_request_id() is None
    assert get_correlation_id() is None


def test_get_logger_installs_json_stream_handler_once():
    """Repeated lookups reuse the same handlers."""
    logger = get_logger("train_traffic_engine.tests.logging")
    again = get_logger("train_traffic_engine.tests.logging")
    assert logger is again
    stream_handlers = [
        handler
        for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler) and getattr(handler, "stream", None) is sys.stdout
    ]
    assert len(stream_handlers) == 1
    handler = stream_handlers[0]
    assert any(isinstance(flt, CorrelationIdFilter) for flt in handler.filters)
    assert isinstance(handler.formatter, jsonlogger.JsonFormatter)


def test_formatter_adds_schema_version():
    formatter = VersionedJsonFormatter("%(message)s", schema_version=LOG_SCHEMA_VERSION)
    output = formatter.format(_record())
    assert f'"schema_version": "{LOG_SCHEMA_VERSION}"' in output
