"""Email sender adapters - Delivery transport implementations."""

from .console import ConsoleEmailSender
from .http import HttpEmailSender
from .smtp import SmtpEmailSender

__all__ = ["ConsoleEmailSender", "HttpEmailSender", "SmtpEmailSender"]
