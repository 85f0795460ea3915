"""
API v1 routes.

Defines the issuance and submission endpoints consumed by the UI layer.
Routes are plain ``def`` so the blocking store and delivery calls run in
FastAPI's threadpool.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse

from src.api.dependencies import get_verification_service
from src.api.models import (
    CodeRequest,
    CodeResponse,
    ErrorResponse,
    LookupCodeRequest,
    SubmitCodeRequest,
    SubmitCodeResponse,
)
from src.domain.exceptions import InvalidContact
from src.domain.ports import DeliveryStatus, SubmitOutcome, SubmitResult
from src.domain.verification import VerificationService

router = APIRouter(tags=["v1"])

_ISSUE_MESSAGES = {
    DeliveryStatus.SENT: "Verification code sent",
    DeliveryStatus.FAILED: "Verification request created, but the code could not be sent. "
    "Please request a new code.",
    DeliveryStatus.SKIPPED: "Verification request created",
}

_SUBMIT_FAILURES = {
    SubmitResult.NOT_FOUND: (status.HTTP_404_NOT_FOUND, "Verification request not found"),
    SubmitResult.ALREADY_VERIFIED: (status.HTTP_409_CONFLICT, "Already verified"),
    SubmitResult.EXPIRED: (status.HTTP_410_GONE, "Verification code expired"),
    SubmitResult.TOO_MANY_ATTEMPTS: (
        status.HTTP_429_TOO_MANY_REQUESTS,
        "Too many attempts. Please request a new code",
    ),
}

_SUBMIT_RESPONSES = {
    400: {"model": ErrorResponse, "description": "Invalid code, with attempts remaining"},
    404: {"model": ErrorResponse, "description": "Verification request not found"},
    409: {"model": ErrorResponse, "description": "Already verified"},
    410: {"model": ErrorResponse, "description": "Verification code expired"},
    429: {"model": ErrorResponse, "description": "Too many attempts"},
    503: {"model": ErrorResponse, "description": "Verification store unavailable"},
}


def _submit_response(outcome: SubmitOutcome) -> SubmitCodeResponse | JSONResponse:
    """Map a submission outcome to the HTTP contract."""
    if outcome.verified:
        return SubmitCodeResponse(verified=True)

    if outcome.result is SubmitResult.INVALID_CODE:
        remaining = outcome.attempts_remaining or 0
        error = ErrorResponse(
            detail=f"Invalid code. {remaining} attempts remaining",
            attempts_remaining=remaining,
        )
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error.model_dump())

    status_code, detail = _SUBMIT_FAILURES[outcome.result]
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(detail=detail).model_dump(exclude_none=True),
    )


@router.post(
    "/verifications",
    response_model=CodeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        422: {"model": ErrorResponse, "description": "Invalid contact"},
        503: {"model": ErrorResponse, "description": "Verification store unavailable"},
    },
    summary="Request a verification code",
    description="Submit an email address or phone number. A 6-digit code is generated "
    "and, for email contacts, sent to the address.",
)
def request_code(
    request_data: CodeRequest,
    service: VerificationService = Depends(get_verification_service),
) -> CodeResponse:
    """
    Create a verification request and deliver its code.

    - **contact**: Email address or phone number
    - **contact_type**: `email` or `phone`

    A failed delivery still returns 201 with `delivery_status: failed`.
    """
    try:
        outcome = service.request_code(request_data.contact, request_data.contact_type)
    except InvalidContact as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e),
        ) from None

    return CodeResponse(
        verification_id=outcome.verification_id,
        delivery_status=outcome.delivery_status,
        message_id=outcome.message_id,
        message=_ISSUE_MESSAGES[outcome.delivery_status],
    )


@router.post(
    "/verifications/lookup",
    response_model=SubmitCodeResponse,
    responses=_SUBMIT_RESPONSES,
    summary="Submit a code by contact",
    description="Alternate path: submit a code against the newest pending request for a contact.",
)
def submit_code_for_contact(
    request_data: LookupCodeRequest,
    service: VerificationService = Depends(get_verification_service),
) -> SubmitCodeResponse | JSONResponse:
    outcome = service.submit_code_for_contact(
        request_data.contact, request_data.contact_type, request_data.code
    )
    return _submit_response(outcome)


@router.post(
    "/verifications/{verification_id}/submit",
    response_model=SubmitCodeResponse,
    responses=_SUBMIT_RESPONSES,
    summary="Submit a verification code",
    description="Submit the 6-digit code for a verification request. "
    "A wrong code consumes one of the request's attempts.",
)
def submit_code(
    verification_id: str,
    request_data: SubmitCodeRequest,
    service: VerificationService = Depends(get_verification_service),
) -> SubmitCodeResponse | JSONResponse:
    """
    Verify a code against a verification request.

    - **code**: Code as entered by the user, compared verbatim
    """
    try:
        parsed_id = UUID(verification_id)
    except ValueError:
        return _submit_response(SubmitOutcome(SubmitResult.NOT_FOUND))

    outcome = service.submit_code(parsed_id, request_data.code)
    return _submit_response(outcome)
