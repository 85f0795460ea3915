"""Verification code generation."""

import secrets

CODE_LENGTH = 6
_LOWEST_CODE = 10 ** (CODE_LENGTH - 1)


def generate_code() -> str:
    """
    Generate a 6-digit verification code in [100000, 999999].

    Uses secrets module for cryptographic randomness. Returns string
    so it is compared as text, never as a number.
    """
    return str(_LOWEST_CODE + secrets.randbelow(9 * _LOWEST_CODE))
