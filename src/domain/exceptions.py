"""
Domain exceptions - Semantic error types for contact verification.

This module defines domain-specific exceptions that communicate
business rule violations without leaking infrastructure details.
Submission outcomes are not exceptions; see ports.SubmitResult.
"""


class VerificationError(Exception):
    """Base class for verification domain errors."""

    pass


class InvalidContact(VerificationError):
    """Contact string rejected by the format check, before any code is issued."""

    pass


class PersistenceError(VerificationError):
    """Verification store unavailable or write failed."""

    pass


class DeliveryError(VerificationError):
    """Delivery transport failed or timed out. Non-fatal to issuance."""

    pass
