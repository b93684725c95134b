"""Tests for structlog configuration and the correlation-id processor."""

import logging

import pytest
from asgi_correlation_id.context import correlation_id

from stageplan.core.logging import QUIET_LOGGERS, add_correlation_id, configure_structlog

pytestmark = pytest.mark.unit


def test_quiet_loggers_stay_at_warning_in_debug():
    configure_structlog(log_level="DEBUG", json_logs=False)
    try:
        assert logging.getLogger().level == logging.DEBUG
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
    finally:
        configure_structlog()


def test_correlation_id_added_inside_request():
    token = correlation_id.set("req-123")
    try:
        event = add_correlation_id(None, "info", {"event": "forecast_recomputed"})
    finally:
        correlation_id.reset(token)

    assert event["correlation_id"] == "req-123"


def test_correlation_id_omitted_outside_request():
    event = add_correlation_id(None, "info", {"event": "backfill_done"})

    assert "correlation_id" not in event
