"""Tests for logging configuration."""

import logging

import pytest
import structlog

from core.logging_config import LogContext, configure_logging


@pytest.fixture(autouse=True)
def clear_context():
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.mark.unit
def test_log_context_binds_and_unbinds():
    with LogContext(session_id="sess_1", action="number"):
        assert structlog.contextvars.get_contextvars() == {"session_id": "sess_1", "action": "number"}

    assert structlog.contextvars.get_contextvars() == {}


@pytest.mark.unit
def test_nested_log_context_restores_outer_fields():
    with LogContext(session_id="sess_1", action="outer"):
        with LogContext(action="inner"):
            assert structlog.contextvars.get_contextvars()["action"] == "inner"
        assert structlog.contextvars.get_contextvars() == {"session_id": "sess_1", "action": "outer"}


@pytest.mark.unit
def test_configure_logging_levels():
    configure_logging("debug")
    assert logging.getLogger().level == logging.DEBUG
    assert logging.getLogger("uvicorn.access").level == logging.WARNING

    configure_logging("nonsense", json_logs=True)
    assert logging.getLogger().level == logging.INFO
