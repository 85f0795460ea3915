"""
Shared fixtures for adversarial tests.

Every adversarial scenario runs against both verification stores; the
PostgreSQL variant is skipped when no database is reachable.
"""

import pytest

from src.adapters.repository.memory import InMemoryVerificationRepository
from src.domain.verification import VerificationService


@pytest.fixture(params=["memory", "postgres"])
def store(request: pytest.FixtureRequest):
    """Verification store under attack."""
    if request.param == "memory":
        return InMemoryVerificationRepository()
    return request.getfixturevalue("pg_repository")


@pytest.fixture
def target(store, email_sender, clock) -> VerificationService:
    """Verification service wired to the store under attack."""
    return VerificationService(repository=store, email_sender=email_sender, clock=clock)
