"""
Pydantic models for the email batch logging API.

Field names are snake_case in Python and camelCase on the wire.
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from orchestrator.db.models import BatchStatus, EmailBatch, EmailRecipient
from orchestrator.validation import is_valid_email


def to_iso(value: datetime) -> str:
    """Render a timestamp as UTC ISO 8601 with a trailing Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class CamelModel(BaseModel):
    """Base model serialized with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LogEmailBatchRequest(CamelModel):
    """Body of POST /api/log-email-batch."""

    holiday_name: str = Field(min_length=1)
    tone: str | None = None
    audience_type: str | None = None
    language: str | None = None
    sender_name: str = Field(min_length=1)
    recipients: list[str] = Field(min_length=1)
    status: BatchStatus = BatchStatus.SENT
    error_message: str | None = None

    @field_validator("recipients")
    @classmethod
    def validate_recipients(cls, value: list[str]) -> list[str]:
        invalid = [email for email in value if not is_valid_email(email)]
        if invalid:
            raise ValueError(f"Invalid email address: {', '.join(invalid)}")
        return value


class LogEmailBatchResponse(CamelModel):
    """Response for a created batch."""

    ok: bool = True
    batch_id: str
    recipient_count: int


class RecipientEntry(CamelModel):
    """A recipient inside a batch detail."""

    id: str
    email: str
    subject: str | None = None
    created_at: str

    @classmethod
    def from_orm_recipient(cls, recipient: EmailRecipient) -> "RecipientEntry":
        return cls(
            id=recipient.id,
            email=recipient.email,
            subject=recipient.subject,
            created_at=to_iso(recipient.created_at),
        )


class EmailLogEntry(CamelModel):
    """A batch row in the log listing."""

    id: str
    created_at: str
    holiday_name: str
    tone: str | None = None
    audience_type: str | None = None
    language: str | None = None
    sender_name: str
    status: BatchStatus
    error_message: str | None = None
    recipient_count: int

    @classmethod
    def from_batch(cls, batch: EmailBatch, recipient_count: int) -> "EmailLogEntry":
        return cls(
            id=batch.id,
            created_at=to_iso(batch.created_at),
            holiday_name=batch.holiday_name,
            tone=batch.tone,
            audience_type=batch.audience_type,
            language=batch.language,
            sender_name=batch.sender_name,
            status=batch.status,
            error_message=batch.error_message,
            recipient_count=recipient_count,
        )


class EmailLogsResponse(CamelModel):
    """Response for GET /api/email-logs."""

    ok: bool = True
    logs: list[EmailLogEntry]
    total: int
    limit: int
    offset: int


class BatchDetail(CamelModel):
    """A batch with its recipients."""

    id: str
    created_at: str
    holiday_name: str
    tone: str | None = None
    audience_type: str | None = None
    language: str | None = None
    sender_name: str
    status: BatchStatus
    error_message: str | None = None
    recipients: list[RecipientEntry]

    @classmethod
    def from_batch(cls, batch: EmailBatch) -> "BatchDetail":
        return cls(
            id=batch.id,
            created_at=to_iso(batch.created_at),
            holiday_name=batch.holiday_name,
            tone=batch.tone,
            audience_type=batch.audience_type,
            language=batch.language,
            sender_name=batch.sender_name,
            status=batch.status,
            error_message=batch.error_message,
            recipients=[RecipientEntry.from_orm_recipient(r) for r in batch.recipients],
        )


class BatchDetailResponse(CamelModel):
    """Response for GET /api/email-logs/{id}."""

    ok: bool = True
    batch: BatchDetail
