"""
Shared test fixtures and configuration.

This module provides pytest fixtures for:
- In-memory and PostgreSQL verification stores
- A controllable clock
- A recording email sender
"""

from collections.abc import Generator
from datetime import UTC, datetime, timedelta

import pytest
from psycopg_pool import ConnectionPool, PoolTimeout

from src.adapters.repository.memory import InMemoryVerificationRepository
from src.adapters.repository.postgres import PostgresVerificationRepository, run_migrations
from src.config.settings import get_settings
from src.domain.exceptions import DeliveryError
from src.domain.verification import VerificationService


class FakeClock:
    """Callable clock that tests can move forward."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2026, 1, 1, 12, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


class RecordingEmailSender:
    """EmailSender that remembers every code it was asked to deliver."""

    def __init__(self, fail_with: str | None = None) -> None:
        self.sent: list[tuple[str, str]] = []
        self.fail_with = fail_with

    def send_verification_code(self, email: str, code: str) -> str:
        if self.fail_with is not None:
            raise DeliveryError(self.fail_with)
        self.sent.append((email, code))
        return f"<msg-{len(self.sent)}@test>"

    def verify_transport(self) -> bool:
        return self.fail_with is None

    @property
    def last_code(self) -> str:
        return self.sent[-1][1]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def repository() -> InMemoryVerificationRepository:
    return InMemoryVerificationRepository()


@pytest.fixture
def email_sender() -> RecordingEmailSender:
    return RecordingEmailSender()


@pytest.fixture
def service(
    repository: InMemoryVerificationRepository,
    email_sender: RecordingEmailSender,
    clock: FakeClock,
) -> VerificationService:
    """Verification service over the in-memory store with default limits."""
    return VerificationService(repository=repository, email_sender=email_sender, clock=clock)


@pytest.fixture(scope="session")
def pg_pool() -> Generator[ConnectionPool, None, None]:
    """
    Connection pool against DATABASE_URL with migrations applied.

    Tests depending on it are skipped when PostgreSQL is not reachable.
    """
    settings = get_settings()
    pool = ConnectionPool(conninfo=settings.database_url, min_size=1, max_size=10, open=False)
    try:
        pool.open(wait=True, timeout=5)
    except PoolTimeout:
        pool.close()
        pytest.skip("PostgreSQL not reachable at DATABASE_URL")
    run_migrations(pool)
    yield pool
    pool.close()


@pytest.fixture
def pg_repository(pg_pool: ConnectionPool) -> PostgresVerificationRepository:
    """PostgreSQL repository over an emptied verification_requests table."""
    with pg_pool.connection() as conn:
        conn.execute("DELETE FROM verification_requests")
    return PostgresVerificationRepository(pg_pool)
