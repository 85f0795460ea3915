"""
Unit tests for API request/response models.

Tests Pydantic model validation for issuance and submission endpoints.
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from src.api.models import (
    CodeRequest,
    CodeResponse,
    ErrorResponse,
    LookupCodeRequest,
    SubmitCodeRequest,
)
from src.domain.ports import ContactType, DeliveryStatus


class TestCodeRequest:
    """Tests for CodeRequest model."""

    def test_valid_request(self) -> None:
        request = CodeRequest(contact="user@example.com", contact_type="email")
        assert request.contact == "user@example.com"
        assert request.contact_type is ContactType.EMAIL

    def test_contact_not_normalized(self) -> None:
        """Contact format is the domain's concern; the model keeps it raw."""
        request = CodeRequest(contact="USER@Example.COM", contact_type="email")
        assert request.contact == "USER@Example.COM"

    def test_unknown_contact_type_rejected(self) -> None:
        with pytest.raises(ValidationError) as exc_info:
            CodeRequest(contact="user@example.com", contact_type="sms")
        assert "contact_type" in str(exc_info.value)

    def test_empty_contact_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CodeRequest(contact="", contact_type="email")


class TestSubmitCodeRequest:
    """Tests for SubmitCodeRequest model."""

    def test_code_kept_as_string(self) -> None:
        """Leading zeros survive."""
        assert SubmitCodeRequest(code="012345").code == "012345"

    def test_empty_code_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SubmitCodeRequest(code="")

    def test_overlong_code_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SubmitCodeRequest(code="1" * 17)

    def test_missing_code_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SubmitCodeRequest()  # type: ignore[call-arg]


class TestLookupCodeRequest:
    def test_valid(self) -> None:
        request = LookupCodeRequest(contact="+15551234567", contact_type="phone", code="482913")
        assert request.contact_type is ContactType.PHONE


class TestResponses:
    """Tests for response models."""

    def test_code_response_serializes_enums(self) -> None:
        verification_id = uuid4()
        response = CodeResponse(
            verification_id=verification_id,
            delivery_status=DeliveryStatus.SENT,
            message="Verification code sent",
        )
        dumped = response.model_dump(mode="json")
        assert dumped["verification_id"] == str(verification_id)
        assert dumped["delivery_status"] == "sent"

    def test_error_response_attempts_optional(self) -> None:
        assert ErrorResponse(detail="Already verified").model_dump(exclude_none=True) == {
            "detail": "Already verified"
        }
