"""Value types passed between the validator, the workflow and its callers.

All types are immutable dataclasses.  Nothing here is persisted: a
:class:`SubscriptionRequest` lives for a single form submission and the
:class:`SubscriptionResult` is handed straight back to the caller.

Diagnostics are a small tagged union.  Each variant carries a ``kind``
literal so consumers can branch on it instead of poking at untyped dicts::

    if result.debug is not None and result.debug.kind == "http_error":
        print(result.debug.status)
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Literal, Optional, Union


@dataclass(frozen=True)
class EmailAddress:
    """An email address that passed :func:`email_capture.validation.validate`.

    Do not instantiate directly; use the validator so invalid strings never
    become an ``EmailAddress``.
    """

    value: str

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class SubscriptionRequest:
    email: EmailAddress


@dataclass(frozen=True)
class HttpErrorDiagnostic:
    """The marketing API answered with a non-success status."""

    step: str
    status: int
    body: str
    kind: Literal["http_error"] = field(default="http_error", init=False)


@dataclass(frozen=True)
class NetworkErrorDiagnostic:
    """No response was received (DNS, TLS, timeout, connection reset)."""

    step: str
    detail: str
    kind: Literal["network_error"] = field(default="network_error", init=False)


@dataclass(frozen=True)
class ConfigErrorDiagnostic:
    missing_api_key: bool
    missing_list_id: bool
    kind: Literal["config_error"] = field(default="config_error", init=False)


@dataclass(frozen=True)
class UnexpectedErrorDiagnostic:
    detail: str
    kind: Literal["unexpected_error"] = field(
        default="unexpected_error", init=False
    )


Diagnostic = Union[
    HttpErrorDiagnostic,
    NetworkErrorDiagnostic,
    ConfigErrorDiagnostic,
    UnexpectedErrorDiagnostic,
]


@dataclass(frozen=True)
class SubscriptionResult:
    """Outcome of a subscription attempt.

    Attributes:
        success: True when the profile ended up attached to the list.
        message: Text safe to show to the visitor.
        debug: Developer-facing diagnostic; never render it in production UI.
        revision: API revision that produced the outcome, if any call was made.
    """

    success: bool
    message: str
    debug: Optional[Diagnostic] = None
    revision: Optional[str] = None

    def to_dict(self, include_debug: bool = True) -> Dict[str, Any]:
        """Return a JSON-serialisable representation."""
        data: Dict[str, Any] = {"success": self.success, "message": self.message}
        if include_debug:
            data["debug"] = asdict(self.debug) if self.debug is not None else None
            data["revision"] = self.revision
        return data


__all__ = [
    "EmailAddress",
    "SubscriptionRequest",
    "SubscriptionResult",
    "Diagnostic",
    "HttpErrorDiagnostic",
    "NetworkErrorDiagnostic",
    "ConfigErrorDiagnostic",
    "UnexpectedErrorDiagnostic",
]
