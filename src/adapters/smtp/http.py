"""
HTTP email sender adapter - Implements EmailSender protocol.

Delegates delivery to a remote delivery service speaking the
``POST /api/send-verification-email`` contract: JSON body ``{to, code}``,
answer ``{success, messageId}`` or ``{success: false, error}`` with a
non-2xx status.
"""

import logging

import httpx

from src.domain.exceptions import DeliveryError

logger = logging.getLogger(__name__)


def _json_object(response: httpx.Response) -> dict:
    """Response body as a dict; anything but a JSON object reads as empty."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class HttpEmailSender:
    """
    Implements EmailSender protocol via httpx.

    The client is owned by the sender and closed with close(); the host
    application calls it at shutdown.
    """

    def __init__(self, base_url: str, timeout: float = 15.0, client: httpx.Client | None = None) -> None:
        self._client = client or httpx.Client(base_url=base_url.rstrip("/"), timeout=timeout)

    def send_verification_code(self, email: str, code: str) -> str:
        try:
            response = self._client.post(
                "/api/send-verification-email", json={"to": email, "code": code}
            )
        except httpx.HTTPError as e:
            logger.error("Delivery service unreachable for %s: %s", email, e)
            raise DeliveryError(f"Failed to send email: {e}") from e

        body = _json_object(response)
        if response.is_error or not body.get("success"):
            error = body.get("error") or f"delivery service returned {response.status_code}"
            logger.error("Delivery service rejected %s: %s", email, error)
            raise DeliveryError(error)

        return body.get("messageId", "")

    def verify_transport(self) -> bool:
        try:
            response = self._client.get("/api/verify-smtp")
        except httpx.HTTPError as e:
            logger.warning("Delivery service health check failed: %s", e)
            return False
        return response.is_success and bool(_json_object(response).get("success"))

    def close(self) -> None:
        self._client.close()
