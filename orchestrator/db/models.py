"""
Email batch logging tables.

A batch is written once per webhook submission, successful or not, and is
never updated or deleted afterwards.
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from orchestrator.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class BatchStatus(str, enum.Enum):
    """Outcome of a webhook submission."""

    QUEUED = "queued"
    SENT = "sent"
    ERROR = "error"


class EmailBatch(Base):
    """One submitted holiday email request."""

    __tablename__ = "email_batches"

    id = Column(String(36), primary_key=True, default=_new_id)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)

    holiday_name = Column(String(255), nullable=False)
    tone = Column(String(255), nullable=True)
    audience_type = Column(String(64), nullable=True)
    language = Column(String(16), nullable=True)
    sender_name = Column(String(255), nullable=False)

    status = Column(
        Enum(BatchStatus, name="batch_status", values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=BatchStatus.SENT,
        index=True,
    )
    error_message = Column(Text, nullable=True)

    recipients = relationship(
        "EmailRecipient",
        back_populates="batch",
        order_by="EmailRecipient.position",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<EmailBatch(id={self.id}, holiday={self.holiday_name}, status={self.status})>"


class EmailRecipient(Base):
    """A recipient address belonging to a batch, kept in submission order."""

    __tablename__ = "email_recipients"

    id = Column(String(36), primary_key=True, default=_new_id)
    batch_id = Column(String(36), ForeignKey("email_batches.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)
    email = Column(String(320), nullable=False)
    subject = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    batch = relationship("EmailBatch", back_populates="recipients")

    __table_args__ = (Index("idx_email_recipients_batch_position", "batch_id", "position"),)
