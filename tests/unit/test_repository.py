"""
Tests for the email batch repository.
"""

from datetime import datetime, timedelta, timezone

import pytest

from orchestrator.db.base import _normalize_url, build_engine, build_session_factory, create_tables
from orchestrator.db.models import BatchStatus, EmailBatch
from orchestrator.db.repository import EmailBatchRepository


@pytest.fixture
def db():
    """Session on a fresh in-memory database."""
    engine = build_engine("sqlite://")
    create_tables(engine)
    session = build_session_factory(engine)()
    yield session
    session.close()
    engine.dispose()


@pytest.fixture
def repository(db) -> EmailBatchRepository:
    return EmailBatchRepository(db)


class TestBuildEngine:
    def test_postgres_scheme_normalized(self):
        assert _normalize_url("postgres://u:pw@db/holiday") == "postgresql://u:pw@db/holiday"

    def test_other_urls_unchanged(self):
        assert _normalize_url("sqlite:///logs.db") == "sqlite:///logs.db"


class TestCreateBatch:
    def test_creates_batch_with_recipients(self, repository):
        batch = repository.create_batch(
            holiday_name="Diwali",
            sender_name="Asha",
            recipients=["b@x.com", "a@x.com"],
            tone="warm",
        )

        assert batch.id
        assert batch.status == BatchStatus.SENT
        assert batch.created_at is not None
        assert [r.email for r in batch.recipients] == ["b@x.com", "a@x.com"]
        assert all(r.batch_id == batch.id for r in batch.recipients)

    def test_error_status(self, repository):
        batch = repository.create_batch(
            holiday_name="Holi",
            sender_name="Asha",
            recipients=["a@x.com"],
            status=BatchStatus.ERROR,
            error_message="HTTP 502",
        )

        assert batch.status == BatchStatus.ERROR
        assert batch.error_message == "HTTP 502"


class TestListBatches:
    def _seed(self, repository, db, count: int, status=BatchStatus.SENT) -> list[str]:
        base = datetime(2026, 1, 1, tzinfo=timezone.utc)
        ids = []
        for i in range(count):
            batch = repository.create_batch(
                holiday_name=f"H{i}",
                sender_name="Asha",
                recipients=[f"r{j}@x.com" for j in range(i + 1)],
                status=status,
            )
            batch.created_at = base + timedelta(hours=i)
            ids.append(batch.id)
        db.commit()
        return ids

    def test_newest_first_with_counts(self, repository, db):
        ids = self._seed(repository, db, 3)

        summaries, total = repository.list_batches()

        assert total == 3
        assert [s.batch.id for s in summaries] == list(reversed(ids))
        assert [s.recipient_count for s in summaries] == [3, 2, 1]

    def test_limit_and_offset(self, repository, db):
        ids = self._seed(repository, db, 5)

        summaries, total = repository.list_batches(limit=2, offset=1)

        assert total == 5
        assert [s.batch.id for s in summaries] == [ids[3], ids[2]]

    def test_status_filter(self, repository, db):
        self._seed(repository, db, 2)
        error_ids = self._seed(repository, db, 1, status=BatchStatus.ERROR)

        summaries, total = repository.list_batches(status=BatchStatus.ERROR)

        assert total == 1
        assert [s.batch.id for s in summaries] == error_ids


class TestGetBatch:
    def test_found(self, repository):
        created = repository.create_batch(
            holiday_name="Diwali", sender_name="Asha", recipients=["a@x.com"]
        )

        batch = repository.get_batch(created.id)

        assert isinstance(batch, EmailBatch)
        assert batch.holiday_name == "Diwali"
        assert [r.email for r in batch.recipients] == ["a@x.com"]

    def test_missing(self, repository):
        assert repository.get_batch("missing") is None
