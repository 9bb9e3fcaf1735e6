"""
Pydantic models for the orchestrator API.

This module contains models for:
- login requests and responses
- email batch logging requests and responses
"""

from orchestrator.models.auth import LoginRequest, LoginResponse
from orchestrator.models.email_logs import (
    BatchDetail,
    BatchDetailResponse,
    EmailLogEntry,
    EmailLogsResponse,
    LogEmailBatchRequest,
    LogEmailBatchResponse,
    RecipientEntry,
)

__all__ = [
    "BatchDetail",
    "BatchDetailResponse",
    "EmailLogEntry",
    "EmailLogsResponse",
    "LogEmailBatchRequest",
    "LogEmailBatchResponse",
    "LoginRequest",
    "LoginResponse",
    "RecipientEntry",
]
