"""
Port interfaces - Protocol definitions for infrastructure abstraction.

This module defines the interfaces (ports) that the domain requires
from infrastructure, plus the value types exchanged across them.
Adapters implement these protocols.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Protocol
from uuid import UUID


class ContactType(str, Enum):
    """Channel a verification code is bound to."""

    EMAIL = "email"
    PHONE = "phone"


class SubmitResult(Enum):
    """
    Result of a code submission.

    State Transitions (forward-only):
    - Pending -> Verified (correct code, not expired, attempts < max)
    - Pending -> Pending  (wrong code, attempts + 1)
    - Pending -> Locked   (attempts reached max)
    - Pending -> Expired  (now past expires_at)

    Verified, Locked and Expired are terminal.
    """

    SUCCESS = "success"
    INVALID_CODE = "invalid_code"
    EXPIRED = "expired"
    TOO_MANY_ATTEMPTS = "too_many_attempts"
    ALREADY_VERIFIED = "already_verified"
    NOT_FOUND = "not_found"


class DeliveryStatus(str, Enum):
    """What happened to the code after the record was persisted."""

    SENT = "sent"
    FAILED = "failed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class VerificationRequest:
    """Snapshot of one persisted verification request."""

    id: UUID
    contact: str
    contact_type: ContactType
    code: str
    is_verified: bool = False
    attempts: int = 0
    expires_at: datetime | None = None
    verified_at: datetime | None = None
    created_at: datetime | None = None

    def is_expired(self, now: datetime) -> bool:
        return self.expires_at is not None and self.expires_at <= now


@dataclass(frozen=True)
class SubmitOutcome:
    """Tagged result of submit_code. attempts_remaining is set for INVALID_CODE only."""

    result: SubmitResult
    attempts_remaining: int | None = None

    @property
    def verified(self) -> bool:
        return self.result is SubmitResult.SUCCESS


@dataclass(frozen=True)
class IssueOutcome:
    """
    Result of a successful issuance.

    The record exists whenever an IssueOutcome is returned; delivery_status
    reports separately whether the code reached the contact.
    """

    verification_id: UUID
    delivery_status: DeliveryStatus
    message_id: str | None = None
    delivery_error: str | None = None

    @property
    def delivery_failed(self) -> bool:
        return self.delivery_status is DeliveryStatus.FAILED


class VerificationRepository(Protocol):
    """Port interface for verification request persistence."""

    def create(
        self,
        contact: str,
        contact_type: ContactType,
        code: str,
        expires_at: datetime | None,
    ) -> VerificationRequest:
        """
        Persist a new pending request with attempts=0 and is_verified=False.

        Raises:
            PersistenceError: If the store write fails
        """
        ...

    def get(self, verification_id: UUID) -> VerificationRequest | None:
        """Fetch a request by id, or None if it does not exist."""
        ...

    def find_pending(self, contact: str, contact_type: ContactType) -> VerificationRequest | None:
        """Newest unverified request for the contact, or None."""
        ...

    def record_failed_attempt(self, verification_id: UUID, max_attempts: int) -> int | None:
        """
        Atomically increment attempts for a still-open request.

        The increment only applies while the request is unverified and
        attempts < max_attempts, so concurrent increments are never lost
        and the counter never passes max_attempts.

        Returns:
            The new attempts value, or None if the condition did not hold
        """
        ...

    def mark_verified(
        self, verification_id: UUID, now: datetime, max_attempts: int
    ) -> datetime | None:
        """
        Atomically flip is_verified to True and set verified_at.

        Only applies while the request is unverified, unexpired at `now`
        and attempts < max_attempts.

        Returns:
            verified_at if the transition happened, otherwise None
        """
        ...

    def ping(self) -> None:
        """Raise PersistenceError if the store is unreachable."""
        ...


class EmailSender(Protocol):
    """Port interface for email delivery."""

    def send_verification_code(self, email: str, code: str) -> str:
        """
        Send verification code to email address.

        Must return within a bounded time.

        Args:
            email: Recipient email address
            code: 6-digit verification code

        Returns:
            Transport message id

        Raises:
            DeliveryError: On transport failure or timeout
        """
        ...

    def verify_transport(self) -> bool:
        """Report whether the transport is reachable. Never raises."""
        ...
