"""
Domain layer - Pure business logic with zero framework imports.

This package contains the core business logic for the contact
verification state machine. It defines its own port interfaces for
infrastructure abstraction, ensuring true hexagonal architecture decoupling.
"""

from .codes import generate_code
from .contact import is_valid_email, is_valid_phone, validate_contact
from .exceptions import DeliveryError, InvalidContact, PersistenceError, VerificationError
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
from .verification import VerificationService

__all__ = [
    "ContactType",
    "DeliveryError",
    "DeliveryStatus",
    "EmailSender",
    "InvalidContact",
    "IssueOutcome",
    "PersistenceError",
    "SubmitOutcome",
    "SubmitResult",
    "VerificationError",
    "VerificationRepository",
    "VerificationRequest",
    "VerificationService",
    "generate_code",
    "is_valid_email",
    "is_valid_phone",
    "validate_contact",
]
