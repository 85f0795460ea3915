"""Contact format checks run before any code is issued."""

import re

from .exceptions import InvalidContact
from .ports import ContactType

_EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
_NON_DIGITS = re.compile(r"\D")


def is_valid_email(contact: str) -> bool:
    return _EMAIL_PATTERN.match(contact) is not None


def is_valid_phone(contact: str) -> bool:
    """Digits only after stripping formatting; 2-15 digits, first non-zero."""
    return _PHONE_PATTERN.match(_NON_DIGITS.sub("", contact)) is not None


def validate_contact(contact: str, contact_type: ContactType) -> None:
    """
    Check a contact against the format for its channel.

    Raises:
        InvalidContact: If the contact does not match
    """
    if contact_type is ContactType.EMAIL and not is_valid_email(contact):
        raise InvalidContact("Invalid email address")
    if contact_type is ContactType.PHONE and not is_valid_phone(contact):
        raise InvalidContact("Invalid phone number")
