"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging verification codes for development.
"""

import logging
import uuid

logger = logging.getLogger(__name__)


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    For demo/development purposes - prints verification codes to the log.
    """

    def send_verification_code(self, email: str, code: str) -> str:
        """
        Log verification code to console (simulates email delivery).

        The code is logged at INFO level to be visible in container logs.

        Args:
            email: Recipient email address
            code: 6-digit verification code

        Returns:
            Synthetic message id
        """
        message_id = f"<console-{uuid.uuid4().hex}@localhost>"
        logger.info("[VERIFICATION] Email: %s Code: %s", email, code)
        return message_id

    def verify_transport(self) -> bool:
        return True
