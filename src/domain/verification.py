"""
Verification domain service - code lifecycle state machine.

This module contains the core business logic for contact verification:
issuing a one-time code for an email or phone contact and validating
submissions against it with expiry and attempt limits.

Verification State Machine (Forward-Only Transitions)
=====================================================

States:
- Pending: record created, code outstanding
- Verified: terminal, correct code submitted in time
- Locked: terminal, max_attempts wrong codes submitted
- Expired: terminal, now past expires_at

Valid Transitions:
    Pending -> Verified  (correct code, not expired, attempts < max)
    Pending -> Pending   (wrong code, attempts + 1)
    Pending -> Locked    (attempts reached max)
    Pending -> Expired   (now > expires_at)

Atomicity: the service reads a snapshot, decides, then applies a
conditional update through the repository. When the condition no longer
holds, a concurrent submission changed the record first; the service
re-reads and reports the terminal state it finds.
"""

import logging
import secrets
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from uuid import UUID

from .codes import generate_code
from .contact import validate_contact
from .exceptions import DeliveryError, PersistenceError
from .ports import (
    ContactType,
    DeliveryStatus,
    EmailSender,
    IssueOutcome,
    SubmitOutcome,
    SubmitResult,
    VerificationRepository,
    VerificationRequest,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_CODE_TTL_SECONDS = 600


def utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass
class VerificationService:
    """
    Domain service for contact verification.

    Orchestrates issuance (validate, generate, persist, deliver) and
    submission (fetch, evaluate, conditional update).
    """

    repository: VerificationRepository
    email_sender: EmailSender
    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    code_ttl_seconds: int | None = DEFAULT_CODE_TTL_SECONDS
    clock: Callable[[], datetime] = field(default=utc_now)

    def request_code(self, contact: str, contact_type: ContactType) -> IssueOutcome:
        """
        Issue a new verification code for a contact.

        Delivery failure does not roll back the record: the outcome still
        carries the verification id, with delivery_status FAILED so the
        caller can offer a resend.

        Args:
            contact: Raw email address or phone number
            contact_type: Channel of the contact

        Returns:
            IssueOutcome with the new verification id and delivery status

        Raises:
            InvalidContact: If the contact fails the format check
            PersistenceError: If the record could not be stored
        """
        validate_contact(contact, contact_type)
        code = generate_code()

        expires_at = None
        if self.code_ttl_seconds is not None:
            expires_at = self.clock() + timedelta(seconds=self.code_ttl_seconds)

        record = self.repository.create(contact, contact_type, code, expires_at)
        logger.info("Verification request %s created for %s", record.id, contact_type.value)

        if contact_type is not ContactType.EMAIL:
            # No SMS channel; the code is only visible in the logs.
            logger.info("[VERIFICATION] Phone: %s Code: %s", contact, code)
            return IssueOutcome(record.id, DeliveryStatus.SKIPPED)

        try:
            message_id = self.email_sender.send_verification_code(contact, code)
        except DeliveryError as e:
            logger.warning("Delivery failed for verification request %s: %s", record.id, e)
            return IssueOutcome(record.id, DeliveryStatus.FAILED, delivery_error=str(e))

        return IssueOutcome(record.id, DeliveryStatus.SENT, message_id=message_id)

    def submit_code(self, verification_id: UUID, code: str) -> SubmitOutcome:
        """
        Validate a submitted code against a verification request.

        Checks run in order: existence, already verified, expiry, attempt
        limit, code match. Only a wrong code (attempts + 1) or a correct
        code (verified) mutates the record.

        Args:
            verification_id: Id returned by request_code
            code: Code as typed by the user, compared verbatim

        Returns:
            SubmitOutcome; INVALID_CODE carries attempts_remaining
        """
        now = self.clock()
        record = self.repository.get(verification_id)
        outcome = self._closed_outcome(record, now)
        if outcome is not None:
            return outcome

        if not secrets.compare_digest(record.code.encode(), code.encode()):
            attempts = self.repository.record_failed_attempt(record.id, self.max_attempts)
            if attempts is None:
                return self._reevaluate(record.id, now)
            remaining = max(0, self.max_attempts - attempts)
            if remaining == 0:
                logger.warning("Verification request %s locked after %d attempts", record.id, attempts)
            return SubmitOutcome(SubmitResult.INVALID_CODE, attempts_remaining=remaining)

        verified_at = self.repository.mark_verified(record.id, now, self.max_attempts)
        if verified_at is None:
            return self._reevaluate(record.id, now)

        logger.info("Verification request %s verified", record.id)
        return SubmitOutcome(SubmitResult.SUCCESS)

    def submit_code_for_contact(
        self, contact: str, contact_type: ContactType, code: str
    ) -> SubmitOutcome:
        """
        Alternate lookup-by-contact path.

        Targets the newest unverified request for the contact and applies
        the regular submission rules to it, so a wrong code costs that
        request an attempt. Older requests are reachable by id only.
        """
        record = self.repository.find_pending(contact, contact_type)
        if record is None:
            return SubmitOutcome(SubmitResult.NOT_FOUND)
        return self.submit_code(record.id, code)

    def _closed_outcome(
        self, record: VerificationRequest | None, now: datetime
    ) -> SubmitOutcome | None:
        """Outcome for a request that no longer accepts codes, else None."""
        if record is None:
            return SubmitOutcome(SubmitResult.NOT_FOUND)
        if record.is_verified:
            return SubmitOutcome(SubmitResult.ALREADY_VERIFIED)
        if record.is_expired(now):
            return SubmitOutcome(SubmitResult.EXPIRED)
        if record.attempts >= self.max_attempts:
            return SubmitOutcome(SubmitResult.TOO_MANY_ATTEMPTS)
        return None

    def _reevaluate(self, verification_id: UUID, now: datetime) -> SubmitOutcome:
        outcome = self._closed_outcome(self.repository.get(verification_id), now)
        if outcome is None:
            logger.error("Conditional update rejected for open request %s", verification_id)
            raise PersistenceError("Failed to update verification request")
        return outcome
