"""
In-memory repository adapter - Implements VerificationRepository protocol.

Process-local store for development and tests. Every read-modify-write
runs under one lock, giving the same no-lost-update guarantee as the
conditional UPDATEs of the PostgreSQL adapter.
"""

import threading
import uuid
from dataclasses import replace
from datetime import UTC, datetime
from uuid import UUID

from src.domain.ports import ContactType, VerificationRequest


class InMemoryVerificationRepository:
    """
    Implements VerificationRepository protocol with a dict keyed by id.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Records are frozen dataclasses; updates swap in a replaced copy.
    """

    def __init__(self) -> None:
        self._records: dict[UUID, VerificationRequest] = {}
        self._lock = threading.Lock()

    def create(
        self,
        contact: str,
        contact_type: ContactType,
        code: str,
        expires_at: datetime | None,
    ) -> VerificationRequest:
        record = VerificationRequest(
            id=uuid.uuid4(),
            contact=contact,
            contact_type=contact_type,
            code=code,
            expires_at=expires_at,
            created_at=datetime.now(UTC),
        )
        with self._lock:
            self._records[record.id] = record
        return record

    def get(self, verification_id: UUID) -> VerificationRequest | None:
        with self._lock:
            return self._records.get(verification_id)

    def find_pending(self, contact: str, contact_type: ContactType) -> VerificationRequest | None:
        with self._lock:
            matches = [
                r
                for r in self._records.values()
                if r.contact == contact and r.contact_type is contact_type and not r.is_verified
            ]
        if not matches:
            return None
        # Insertion order breaks created_at ties.
        return max(reversed(matches), key=lambda r: r.created_at)

    def record_failed_attempt(self, verification_id: UUID, max_attempts: int) -> int | None:
        with self._lock:
            record = self._records.get(verification_id)
            if record is None or record.is_verified or record.attempts >= max_attempts:
                return None
            record = replace(record, attempts=record.attempts + 1)
            self._records[verification_id] = record
            return record.attempts

    def mark_verified(
        self, verification_id: UUID, now: datetime, max_attempts: int
    ) -> datetime | None:
        with self._lock:
            record = self._records.get(verification_id)
            if (
                record is None
                or record.is_verified
                or record.attempts >= max_attempts
                or record.is_expired(now)
            ):
                return None
            self._records[verification_id] = replace(record, is_verified=True, verified_at=now)
            return now

    def ping(self) -> None:
        return None
