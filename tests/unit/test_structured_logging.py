"""Tests for structured logging context."""

from uuid import uuid7

import pytest
import structlog
from structlog.testing import CapturingLogger

from src.inspector.core.config import get_settings
from src.inspector.core.logging import (
    bind_request_context,
    bind_user_context,
    clear_request_context,
)

pytestmark = pytest.mark.unit


@pytest.fixture
def capturing_logger():
    """Route structlog through a CapturingLogger for the duration of the test."""
    cap_logger = CapturingLogger()
    old_config = structlog.get_config()
    structlog.configure(
        processors=[structlog.contextvars.merge_contextvars],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=lambda *args, **kwargs: cap_logger,
        cache_logger_on_first_use=False,
    )
    clear_request_context()
    yield cap_logger
    clear_request_context()
    structlog.configure(**old_config)


def _last_event(cap_logger: CapturingLogger) -> dict:
    structlog.get_logger().info("event")
    return cap_logger.calls[-1].kwargs


def test_request_id_is_bound(capturing_logger):
    bind_request_context("3f2b1c9e-0d4a-4b8e-9c7f-2a1d5e6f7a8b")

    assert _last_event(capturing_logger)["request_id"] == "3f2b1c9e-0d4a-4b8e-9c7f-2a1d5e6f7a8b"


def test_missing_request_id_is_not_bound(capturing_logger):
    bind_request_context(None)

    assert "request_id" not in _last_event(capturing_logger)


def test_user_context_is_bound(capturing_logger):
    user_id = uuid7()

    bind_user_context(user_id, "Engineer", email="jdoe@example.com")

    event = _last_event(capturing_logger)
    assert event["user_id"] == str(user_id)
    assert event["role"] == "Engineer"
    assert "user_email" not in event


def test_user_email_logged_only_when_enabled(capturing_logger, monkeypatch):
    monkeypatch.setattr(get_settings(), "log_user_emails", True)

    bind_user_context(uuid7(), "Admin", email="root@example.com")

    assert _last_event(capturing_logger)["user_email"] == "root@example.com"


def test_clear_removes_everything(capturing_logger):
    bind_request_context("req-1")
    bind_user_context(uuid7(), "Admin")

    clear_request_context()

    event = _last_event(capturing_logger)
    assert "request_id" not in event
    assert "user_id" not in event
