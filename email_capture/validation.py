"""Email address validation.

The check is deliberately pragmatic: something without whitespace, an
``@``, and a domain part containing a dot.  It mirrors what the landing
page form enforces in the browser so the server never accepts an address
the form would have rejected (and vice versa).  Full RFC 5321 grammar is
left to the marketing platform.
"""

from __future__ import annotations

import re
from typing import Any

from email_capture.errors import ValidationError
from email_capture.models import EmailAddress

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MISSING_EMAIL_MESSAGE = "Please enter your email address"
INVALID_EMAIL_MESSAGE = "Please enter a valid email address"


def validate(raw: Any) -> EmailAddress:
    """Validate ``raw`` and wrap it in an :class:`EmailAddress`.

    Leading and trailing whitespace is stripped before matching; case is
    preserved.

    Args:
        raw: Value submitted by the visitor.  May be ``None`` or not a string.

    Returns:
        The trimmed address.

    Raises:
        ValidationError: If the value is missing or does not look like
            ``local@domain.tld``.  The message is safe to show to the user.
    """
    if not isinstance(raw, str) or not raw.strip():
        raise ValidationError(MISSING_EMAIL_MESSAGE)
    candidate = raw.strip()
    if not EMAIL_PATTERN.match(candidate):
        raise ValidationError(INVALID_EMAIL_MESSAGE)
    return EmailAddress(candidate)


def is_valid(raw: Any) -> bool:
    try:
        validate(raw)
    except ValidationError:
        return False
    return True


__all__ = [
    "validate",
    "is_valid",
    "EMAIL_PATTERN",
    "MISSING_EMAIL_MESSAGE",
    "INVALID_EMAIL_MESSAGE",
]
