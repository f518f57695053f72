"""Exception hierarchy for the email capture package.

None of these exceptions escape :func:`email_capture.subscription.subscribe`;
they are raised by the lower layers (validation, configuration and the HTTP
transport) and converted into a :class:`~email_capture.models.SubscriptionResult`
at the workflow boundary.
"""

from __future__ import annotations

from typing import Optional


class EmailCaptureError(Exception):
    """Base class for all errors raised by this package."""


class ValidationError(EmailCaptureError):
    """The submitted email address is missing or malformed.

    ``str(exc)`` is a user-facing message and can be shown in the form.
    """


class ConfigurationError(EmailCaptureError):
    """Credentials or settings are missing or invalid."""


class ExternalServiceError(EmailCaptureError):
    """A call to the marketing API failed before a response was received.

    Args:
        step: Name of the workflow step (``"create_profile"``, ...).
        detail: Human readable description of the underlying failure.
        status: HTTP status, when one is known.
        body: Raw response body, when one is known.
    """

    def __init__(
        self,
        step: str,
        detail: str,
        status: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(f"{step}: {detail}")
        self.step = step
        self.detail = detail
        self.status = status
        self.body = body


__all__ = [
    "EmailCaptureError",
    "ValidationError",
    "ConfigurationError",
    "ExternalServiceError",
]
