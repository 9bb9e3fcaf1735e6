"""
Audit logging for security-relevant events.

Provides structured audit logging for login attempts, token and API key
rejections, rate limiting and batch creation. Secrets are never logged.
"""

import logging
from typing import Any

import structlog

from orchestrator.config.logging import AUDIT_LOGGER_NAME

_audit_logger = structlog.wrap_logger(
    logging.getLogger(AUDIT_LOGGER_NAME),
    wrapper_class=structlog.stdlib.BoundLogger,
)


class AuditEvent:
    """Constants for audit event types."""

    # Authentication events
    AUTH_SUCCESS = "auth.success"
    AUTH_FAILURE = "auth.failure"

    # Security events
    SECURITY_INVALID_TOKEN = "security.invalid_token"
    SECURITY_INVALID_API_KEY = "security.invalid_api_key"
    SECURITY_RATE_LIMIT = "security.rate_limit"

    # Data events
    BATCH_CREATE = "batch.create"


def audit_log(
    event: str,
    *,
    client_ip: str | None = None,
    subject: str | None = None,
    code: str | None = None,
    success: bool = True,
    error: str | None = None,
    details: dict[str, Any] | None = None,
) -> None:
    """
    Log an audit event.

    Args:
        event: Event type from AuditEvent constants
        client_ip: Source address of the request
        subject: Authenticated identity, when known
        code: Machine-readable error code for rejections
        success: Whether the operation succeeded
        error: Optional error message if failed
        details: Optional additional details
    """
    log_data: dict[str, Any] = {
        "audit_event": event,
        "success": success,
    }

    if client_ip:
        log_data["client_ip"] = client_ip
    if subject:
        log_data["subject"] = subject
    if code:
        log_data["code"] = code
    if error:
        log_data["error"] = error
    if details:
        log_data["details"] = details

    if success:
        _audit_logger.info(event, **log_data)
    else:
        _audit_logger.warning(event, **log_data)
