"""
Client for the Holiday Email Orchestrator.

Submits holiday email requests to the n8n webhook and talks to the API with
a locally persisted session.
"""

from orchestrator.client.api import BackendClient
from orchestrator.client.config import AUDIENCE_OPTIONS, LANGUAGE_OPTIONS, ClientSettings
from orchestrator.client.form import (
    EmailSubmitter,
    HolidayEmailForm,
    SubmissionResult,
    SubmissionStatus,
)
from orchestrator.client.session import ClientSessionManager
from orchestrator.client.storage import (
    FileSessionStorage,
    InMemorySessionStorage,
    SessionStorage,
)

__all__ = [
    "AUDIENCE_OPTIONS",
    "BackendClient",
    "ClientSessionManager",
    "ClientSettings",
    "EmailSubmitter",
    "FileSessionStorage",
    "HolidayEmailForm",
    "InMemorySessionStorage",
    "LANGUAGE_OPTIONS",
    "SessionStorage",
    "SubmissionResult",
    "SubmissionStatus",
]
