"""
Persistence for email batch logs.
"""

from orchestrator.db.base import Base, build_engine, build_session_factory, create_tables, get_db
from orchestrator.db.models import BatchStatus, EmailBatch, EmailRecipient
from orchestrator.db.repository import BatchSummary, EmailBatchRepository

__all__ = [
    "Base",
    "BatchStatus",
    "BatchSummary",
    "EmailBatch",
    "EmailBatchRepository",
    "EmailRecipient",
    "build_engine",
    "build_session_factory",
    "create_tables",
    "get_db",
]
