"""
Tests for logging configuration.
"""

import logging

import pytest
import structlog

from orchestrator.config.logging import (
    AUDIT_LOGGER_NAME,
    REDACTED,
    add_service,
    bind_request_context,
    clear_request_context,
    configure_logging,
    get_request_id,
    mask_secrets,
)


@pytest.fixture(autouse=True)
def clean_context():
    clear_request_context()
    yield
    clear_request_context()


class TestMaskSecrets:
    """Tests for the mask_secrets processor."""

    def test_masks_secret_keys(self):
        event = mask_secrets(
            None, "info", {"event": "login", "password": "hunter2", "Authorization": "Bearer x"}
        )

        assert event == {"event": "login", "password": REDACTED, "Authorization": REDACTED}

    def test_masks_nested_values(self):
        event = mask_secrets(None, "info", {"event": "e", "details": {"api_key": "k", "count": 2}})

        assert event["details"] == {"api_key": REDACTED, "count": 2}

    def test_leaves_other_fields(self):
        event = {"event": "Request completed", "status_code": 200, "code": "INVALID_TOKEN"}

        assert mask_secrets(None, "info", dict(event)) == event


class TestAddService:
    def test_stamps_service_name(self):
        assert add_service(None, "info", {"event": "e"})["service"] == "Holiday Email Orchestrator API"


class TestRequestContext:
    def test_uses_supplied_request_id(self):
        assert bind_request_context("req-1", path="/health") == "req-1"

        assert get_request_id() == "req-1"
        assert structlog.contextvars.get_contextvars()["path"] == "/health"

    def test_generates_request_id(self):
        request_id = bind_request_context()

        assert len(request_id) == 12
        assert get_request_id() == request_id

    def test_rebinding_replaces_previous_request(self):
        bind_request_context("req-1", path="/a")
        bind_request_context("req-2")

        assert structlog.contextvars.get_contextvars() == {"request_id": "req-2"}

    def test_clear(self):
        bind_request_context("req-1")
        clear_request_context()

        assert get_request_id() is None


class TestConfigureLogging:
    def test_quiets_dependencies(self):
        configure_logging(level="INFO", json_format=False)

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("sqlalchemy.engine").level == logging.WARNING

    def test_debug_keeps_dependencies_verbose(self):
        configure_logging(level="DEBUG", json_format=False)

        assert logging.getLogger("httpx").level == logging.DEBUG

    def test_audit_events_kept_above_info(self):
        """Raising the application level does not hide audit events."""
        configure_logging(level="ERROR", json_format=True)

        assert logging.getLogger().level == logging.ERROR
        assert logging.getLogger(AUDIT_LOGGER_NAME).isEnabledFor(logging.INFO)
