"""
SMTP email sender adapter - Implements EmailSender protocol.

Sends the verification code over SMTP with STARTTLS. Every connection is
bounded by a timeout so a slow or unreachable server can never block
issuance; timeouts surface as DeliveryError like any other failure.
"""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr, make_msgid

from src.domain.exceptions import DeliveryError

logger = logging.getLogger(__name__)

SUBJECT = "Your Verification Code"


def render_verification_email(code: str, expire_minutes: int) -> tuple[str, str]:
    """Return (plain text, html) bodies for a verification code email."""
    text = (
        "Verify your email\n\n"
        f"Your verification code is: {code}\n\n"
        f"This code will expire in {expire_minutes} minutes.\n\n"
        "If you didn't request this email, please ignore it."
    )
    html = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
  <h1 style="color: #1f2937; text-align: center;">Verify Your Email</h1>
  <p style="color: #6b7280; text-align: center;">Enter this code to complete your verification</p>
  <p style="font-size: 32px; letter-spacing: 8px; text-align: center; color: #111827;">{code}</p>
  <p style="color: #6b7280; font-size: 14px; text-align: center;">
    This code will expire in {expire_minutes} minutes.
  </p>
  <p style="color: #6b7280; font-size: 12px; text-align: center;">
    If you didn't request this email, please ignore it.
  </p>
</div>
"""
    return text, html


class SmtpEmailSender:
    """
    Implements EmailSender protocol via smtplib.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Opens one connection per message; holds no socket between calls.
    """

    def __init__(
        self,
        host: str,
        port: int,
        from_email: str,
        from_name: str = "",
        username: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 15.0,
        expire_minutes: int = 10,
    ) -> None:
        self._host = host
        self._port = port
        self._from_email = from_email
        self._from_name = from_name
        self._username = username
        self._password = password
        self._use_tls = use_tls
        self._timeout = timeout
        self._expire_minutes = expire_minutes

    def _connect(self) -> smtplib.SMTP:
        server = smtplib.SMTP(self._host, self._port, timeout=self._timeout)
        try:
            if self._use_tls:
                server.starttls()
            if self._username:
                server.login(self._username, self._password)
        except BaseException:
            server.close()
            raise
        return server

    def send_verification_code(self, email: str, code: str) -> str:
        """
        Send the code as a multipart (text + html) message.

        Returns:
            The Message-ID header of the sent message

        Raises:
            DeliveryError: On SMTP, network or timeout failure
        """
        text, html = render_verification_email(code, self._expire_minutes)
        message_id = make_msgid(domain=self._from_email.partition("@")[2] or None)

        msg = MIMEMultipart("alternative")
        msg["Subject"] = SUBJECT
        msg["From"] = formataddr((self._from_name, self._from_email))
        msg["To"] = email
        msg["Message-ID"] = message_id
        msg.attach(MIMEText(text, "plain"))
        msg.attach(MIMEText(html, "html"))

        try:
            with self._connect() as server:
                server.sendmail(self._from_email, [email], msg.as_string())
        except smtplib.SMTPAuthenticationError as e:
            logger.error("SMTP login failed sending to %s: %s", email, e)
            raise DeliveryError("Failed to send email: authentication failed") from e
        except (smtplib.SMTPException, OSError) as e:
            # OSError covers socket timeouts and refused connections
            logger.error("SMTP delivery to %s failed: %s", email, e)
            raise DeliveryError(f"Failed to send email: {e}") from e

        logger.info("Verification email sent to %s (message id %s)", email, message_id)
        return message_id

    def verify_transport(self) -> bool:
        """Connect, negotiate TLS, authenticate and NOOP."""
        try:
            with self._connect() as server:
                status, _ = server.noop()
        except (smtplib.SMTPException, OSError) as e:
            logger.warning("SMTP verification failed: %s", e)
            return False
        return status == 250
