"""
Tests for audit logging.
"""

from unittest.mock import patch

from orchestrator.audit import AuditEvent, audit_log


class TestAuditEvents:
    """Tests for audit event constants."""

    def test_auth_events_defined(self):
        assert AuditEvent.AUTH_SUCCESS == "auth.success"
        assert AuditEvent.AUTH_FAILURE == "auth.failure"

    def test_security_events_defined(self):
        assert AuditEvent.SECURITY_INVALID_TOKEN == "security.invalid_token"
        assert AuditEvent.SECURITY_INVALID_API_KEY == "security.invalid_api_key"
        assert AuditEvent.SECURITY_RATE_LIMIT == "security.rate_limit"

    def test_data_events_defined(self):
        assert AuditEvent.BATCH_CREATE == "batch.create"


class TestAuditLog:
    """Tests for audit_log function."""

    @patch("orchestrator.audit._audit_logger")
    def test_audit_log_success(self, mock_logger):
        """Successful events are logged at info."""
        audit_log(AuditEvent.AUTH_SUCCESS, client_ip="10.0.0.1", subject="admin")

        mock_logger.info.assert_called_once()
        call_args = mock_logger.info.call_args
        assert call_args[0][0] == AuditEvent.AUTH_SUCCESS
        assert call_args[1]["client_ip"] == "10.0.0.1"
        assert call_args[1]["subject"] == "admin"
        assert call_args[1]["success"] is True

    @patch("orchestrator.audit._audit_logger")
    def test_audit_log_failure(self, mock_logger):
        """Failed events are logged at warning with their code."""
        audit_log(
            AuditEvent.AUTH_FAILURE,
            client_ip="10.0.0.1",
            code="INVALID_PASSWORD",
            success=False,
        )

        mock_logger.warning.assert_called_once()
        call_args = mock_logger.warning.call_args
        assert call_args[1]["success"] is False
        assert call_args[1]["code"] == "INVALID_PASSWORD"

    @patch("orchestrator.audit._audit_logger")
    def test_audit_log_omits_empty_fields(self, mock_logger):
        """Unset optional fields are not logged."""
        audit_log(AuditEvent.BATCH_CREATE)

        kwargs = mock_logger.info.call_args[1]
        assert set(kwargs) == {"audit_event", "success"}

    @patch("orchestrator.audit._audit_logger")
    def test_audit_log_details(self, mock_logger):
        audit_log(AuditEvent.BATCH_CREATE, details={"batch_id": "b-1"})

        assert mock_logger.info.call_args[1]["details"] == {"batch_id": "b-1"}
