"""
Repository layer for email batch logging.

Handles:
- creating a batch together with its recipients in one transaction
- paginated listing with recipient counts
- single batch lookup with recipients
"""

from dataclasses import dataclass

from sqlalchemy import desc, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, selectinload

from orchestrator.config.logging import get_logger
from orchestrator.db.models import BatchStatus, EmailBatch, EmailRecipient

logger = get_logger(__name__)


@dataclass(frozen=True)
class BatchSummary:
    """A batch row with its recipient count."""

    batch: EmailBatch
    recipient_count: int


class EmailBatchRepository:
    """Data access for email batches."""

    def __init__(self, db_session: Session):
        self.db = db_session

    def create_batch(
        self,
        holiday_name: str,
        sender_name: str,
        recipients: list[str],
        status: BatchStatus = BatchStatus.SENT,
        tone: str | None = None,
        audience_type: str | None = None,
        language: str | None = None,
        error_message: str | None = None,
    ) -> EmailBatch:
        """Create a batch and its recipients atomically."""
        batch = EmailBatch(
            holiday_name=holiday_name,
            tone=tone,
            audience_type=audience_type,
            language=language,
            sender_name=sender_name,
            status=status,
            error_message=error_message,
            recipients=[
                EmailRecipient(email=email, position=position)
                for position, email in enumerate(recipients)
            ],
        )
        try:
            self.db.add(batch)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Error creating email batch", error=str(e))
            raise

        self.db.refresh(batch)
        return batch

    def list_batches(
        self,
        limit: int = 20,
        offset: int = 0,
        status: BatchStatus | None = None,
    ) -> tuple[list[BatchSummary], int]:
        """
        List batches newest first.

        Returns:
            (page of BatchSummary, total matching batches)
        """
        recipient_count = (
            select(func.count(EmailRecipient.id))
            .where(EmailRecipient.batch_id == EmailBatch.id)
            .correlate(EmailBatch)
            .scalar_subquery()
        )

        query = select(EmailBatch, recipient_count)
        count_query = select(func.count(EmailBatch.id))
        if status is not None:
            query = query.where(EmailBatch.status == status)
            count_query = count_query.where(EmailBatch.status == status)

        query = query.order_by(desc(EmailBatch.created_at)).limit(limit).offset(offset)

        rows = self.db.execute(query).all()
        total = self.db.execute(count_query).scalar_one()

        return [BatchSummary(batch=row[0], recipient_count=row[1]) for row in rows], total

    def get_batch(self, batch_id: str) -> EmailBatch | None:
        """Fetch one batch with its recipients, or None."""
        query = (
            select(EmailBatch)
            .options(selectinload(EmailBatch.recipients))
            .where(EmailBatch.id == batch_id)
        )
        return self.db.execute(query).scalar_one_or_none()
