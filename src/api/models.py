"""
API request and response models.

Pydantic models for FastAPI endpoint validation and OpenAPI schema generation.
Contact format is checked by the domain, not here, so the user sees the
same messages whichever entry point is used.
"""

from uuid import UUID

from pydantic import BaseModel, Field

from src.domain.ports import ContactType, DeliveryStatus


class CodeRequest(BaseModel):
    """Request model for issuing a verification code."""

    contact: str = Field(..., min_length=1, max_length=320, description="Email address or phone number")
    contact_type: ContactType


class CodeResponse(BaseModel):
    """Response model for a created verification request."""

    verification_id: UUID
    delivery_status: DeliveryStatus
    message_id: str | None = None
    message: str


class SubmitCodeRequest(BaseModel):
    """Request model for submitting a code against a verification id."""

    code: str = Field(..., min_length=1, max_length=16, description="6-digit verification code")


class LookupCodeRequest(BaseModel):
    """Request model for the lookup-by-code path."""

    contact: str = Field(..., min_length=1, max_length=320)
    contact_type: ContactType
    code: str = Field(..., min_length=1, max_length=16)


class SubmitCodeResponse(BaseModel):
    """Response model for successful verification."""

    verified: bool = True


class ErrorResponse(BaseModel):
    """Standard error response model."""

    detail: str
    attempts_remaining: int | None = None


class SendEmailRequest(BaseModel):
    """Delivery boundary request. Fields are optional so missing ones get a 400, not a 422."""

    to: str | None = None
    code: str | None = None
