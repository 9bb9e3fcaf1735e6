"""
Holiday email request submission.

Validates the form, posts it to the n8n webhook and logs the outcome to the
API in the background. The logging call never affects the result shown to
the user.
"""

import asyncio
import enum
from dataclasses import dataclass, field
from typing import Any

import httpx

from orchestrator.client.api import BackendClient
from orchestrator.client.config import ClientSettings
from orchestrator.config.logging import get_logger
from orchestrator.constants import WEBHOOK_SECRET_HEADER
from orchestrator.db.models import BatchStatus
from orchestrator.validation import FormValidationResult, extract_emails, validate_form

logger = get_logger(__name__)

DEFAULT_TONE = "warm"

SUCCESS_MESSAGE = "Request accepted! Emails will be generated and sent."
UNREACHABLE_MESSAGE = "Unable to reach the automation server. Is n8n running?"
UNREACHABLE_LOG_MESSAGE = "Network error: Unable to reach automation server"


@dataclass
class HolidayEmailForm:
    """Fields of a holiday email request as entered by the user."""

    holiday_name: str = ""
    sender_name: str = ""
    recipients: str = ""
    tone: str = ""
    audience_type: str = "business"
    language: str = "en"

    def validate(self) -> FormValidationResult:
        return validate_form(self.holiday_name, self.sender_name, self.recipients)

    def webhook_payload(self) -> dict[str, Any]:
        """Body sent to the webhook. Recipients stay a raw string; n8n splits them."""
        return {
            "holiday_name": self.holiday_name.strip(),
            "tone": self.tone.strip() or DEFAULT_TONE,
            "sender_name": self.sender_name.strip(),
            "audience_type": self.audience_type,
            "language": self.language,
            "recipients": self.recipients,
        }

    def log_payload(
        self,
        status: BatchStatus,
        error_message: str | None = None,
    ) -> dict[str, Any]:
        """Body sent to the batch logging endpoint."""
        payload: dict[str, Any] = {
            "holidayName": self.holiday_name.strip(),
            "tone": self.tone.strip() or None,
            "audienceType": self.audience_type or None,
            "language": self.language or None,
            "senderName": self.sender_name.strip(),
            "recipients": extract_emails(self.recipients),
            "status": status.value,
        }
        if error_message is not None:
            payload["errorMessage"] = error_message
        return payload


class SubmissionStatus(str, enum.Enum):
    SUCCESS = "success"
    ERROR = "error"
    INVALID = "invalid"


@dataclass(frozen=True)
class SubmissionResult:
    """What the user is told after a submission."""

    status: SubmissionStatus
    message: str | None = None
    errors: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == SubmissionStatus.SUCCESS


class EmailSubmitter:
    """Sends holiday email requests to the webhook."""

    def __init__(
        self,
        settings: ClientSettings,
        backend: BackendClient,
        http_client: httpx.AsyncClient,
    ):
        self._settings = settings
        self._backend = backend
        self._http = http_client
        self._pending: set[asyncio.Task] = set()

    def _webhook_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self._settings.n8n_secret:
            headers[WEBHOOK_SECRET_HEADER] = self._settings.n8n_secret
        return headers

    async def submit(self, form: HolidayEmailForm) -> SubmissionResult:
        """
        Validate and submit a request.

        Invalid forms are rejected without any network call. Otherwise the
        webhook is called once and the outcome is logged in the background.
        """
        validation = form.validate()
        if not validation.valid:
            return SubmissionResult(SubmissionStatus.INVALID, errors=validation.errors)

        try:
            response = await self._http.post(
                self._settings.webhook_url,
                json=form.webhook_payload(),
                headers=self._webhook_headers(),
                timeout=self._settings.webhook_timeout,
            )
        except httpx.HTTPError as e:
            logger.warning("Webhook request failed", error=str(e))
            self._log_in_background(
                form.log_payload(BatchStatus.ERROR, error_message=UNREACHABLE_LOG_MESSAGE)
            )
            return SubmissionResult(SubmissionStatus.ERROR, message=UNREACHABLE_MESSAGE)

        if response.is_success:
            logger.info("Webhook accepted request", status_code=response.status_code)
            self._log_in_background(form.log_payload(BatchStatus.SENT))
            return SubmissionResult(SubmissionStatus.SUCCESS, message=SUCCESS_MESSAGE)

        body = response.text
        detail = f": {body}" if body else ""
        logger.warning("Webhook rejected request", status_code=response.status_code)
        self._log_in_background(
            form.log_payload(
                BatchStatus.ERROR,
                error_message=f"HTTP {response.status_code}{detail}",
            )
        )
        return SubmissionResult(
            SubmissionStatus.ERROR,
            message=f"Server error (HTTP {response.status_code}){detail}",
        )

    def _log_in_background(self, payload: dict[str, Any]) -> None:
        task = asyncio.create_task(self._backend.log_email_batch(payload))
        self._pending.add(task)
        task.add_done_callback(self._on_log_done)

    def _on_log_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Batch logging task failed", error=str(task.exception()))

    async def wait_for_pending(self) -> None:
        """Wait for background logging calls to finish."""
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
