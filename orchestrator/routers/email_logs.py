"""
Email batch logging endpoints.

All routes require the API key and a valid session token:
- POST /api/log-email-batch - Record a webhook submission
- GET /api/email-logs - List recent batches
- GET /api/email-logs/{batch_id} - Get one batch with recipients

Unknown paths under /api answer 404 only after the guards pass.
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from orchestrator.audit import AuditEvent, audit_log
from orchestrator.auth.guards import require_api_access
from orchestrator.auth.tokens import SessionClaims
from orchestrator.config.logging import get_logger
from orchestrator.constants import EMAIL_LOGS_DEFAULT_LIMIT, EMAIL_LOGS_MAX_LIMIT
from orchestrator.db.base import get_db
from orchestrator.db.models import BatchStatus
from orchestrator.db.repository import EmailBatchRepository
from orchestrator.errors import BatchNotFoundError
from orchestrator.models.email_logs import (
    BatchDetail,
    BatchDetailResponse,
    EmailLogEntry,
    EmailLogsResponse,
    LogEmailBatchRequest,
    LogEmailBatchResponse,
)

logger = get_logger(__name__)

router = APIRouter(
    prefix="/api",
    tags=["email-logs"],
    dependencies=[Depends(require_api_access)],
)


@router.post("/log-email-batch", status_code=201, response_model=LogEmailBatchResponse)
def log_email_batch(
    body: LogEmailBatchRequest,
    db: Session = Depends(get_db),
    user: SessionClaims = Depends(require_api_access),
) -> LogEmailBatchResponse:
    """Record an email batch and its recipients."""
    repository = EmailBatchRepository(db)
    batch = repository.create_batch(
        holiday_name=body.holiday_name,
        sender_name=body.sender_name,
        recipients=body.recipients,
        status=body.status,
        tone=body.tone,
        audience_type=body.audience_type,
        language=body.language,
        error_message=body.error_message,
    )

    recipient_count = len(batch.recipients)
    logger.info("Created email batch", batch_id=batch.id, recipient_count=recipient_count)
    audit_log(
        AuditEvent.BATCH_CREATE,
        subject=user.subject,
        details={"batch_id": batch.id, "status": batch.status.value},
    )

    return LogEmailBatchResponse(batch_id=batch.id, recipient_count=recipient_count)


@router.get("/email-logs", response_model=EmailLogsResponse)
def get_email_logs(
    limit: int = Query(EMAIL_LOGS_DEFAULT_LIMIT, ge=1, le=EMAIL_LOGS_MAX_LIMIT),
    offset: int = Query(0, ge=0),
    status: BatchStatus | None = Query(None),
    db: Session = Depends(get_db),
) -> EmailLogsResponse:
    """List batches newest first, optionally filtered by status."""
    repository = EmailBatchRepository(db)
    summaries, total = repository.list_batches(limit=limit, offset=offset, status=status)

    return EmailLogsResponse(
        logs=[EmailLogEntry.from_batch(s.batch, s.recipient_count) for s in summaries],
        total=total,
        limit=limit,
        offset=offset,
    )


@router.get("/email-logs/{batch_id}", response_model=BatchDetailResponse)
def get_email_batch(batch_id: str, db: Session = Depends(get_db)) -> BatchDetailResponse:
    """Get a batch with all of its recipients."""
    batch = EmailBatchRepository(db).get_batch(batch_id)
    if batch is None:
        raise BatchNotFoundError(batch_id)

    return BatchDetailResponse(batch=BatchDetail.from_batch(batch))


@router.api_route(
    "/{path:path}",
    methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    include_in_schema=False,
)
def unknown_api_route(path: str) -> None:
    """Unknown /api paths are guarded like the rest of the API before the 404."""
    raise HTTPException(status_code=404)
