"""
Delivery boundary routes.

HTTP face of the delivery adapter, for clients that send codes through
this service rather than through the verification endpoints:
- POST /api/send-verification-email - deliver ``{to, code}``
- GET /api/verify-smtp - transport health
"""

import logging

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.api.dependencies import get_email_sender
from src.api.models import SendEmailRequest
from src.domain.exceptions import DeliveryError
from src.domain.ports import EmailSender

logger = logging.getLogger(__name__)

router = APIRouter(tags=["delivery"])


@router.post("/send-verification-email", summary="Send a verification code email")
def send_verification_email(
    request_data: SendEmailRequest,
    email_sender: EmailSender = Depends(get_email_sender),
) -> JSONResponse:
    if not request_data.to or not request_data.code:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"success": False, "error": "Email and verification code are required"},
        )

    try:
        message_id = email_sender.send_verification_code(request_data.to, request_data.code)
    except DeliveryError as e:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"success": False, "error": str(e)},
        )

    logger.info("Email sent successfully to %s (message id %s)", request_data.to, message_id)
    return JSONResponse(
        content={
            "success": True,
            "messageId": message_id,
            "message": "Verification email sent successfully",
        }
    )


@router.get("/verify-smtp", summary="Check delivery transport health")
def verify_smtp(email_sender: EmailSender = Depends(get_email_sender)) -> JSONResponse:
    if email_sender.verify_transport():
        return JSONResponse(
            content={"success": True, "message": "SMTP connection is working properly"}
        )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"success": False, "error": "SMTP connection failed"},
    )
