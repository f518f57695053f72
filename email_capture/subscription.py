"""Subscription workflow: relay a visitor's email to the marketing list.

The flow is linear and makes at most three calls per revision:

1. create the profile (``POST /profiles/``);
2. on a 409 conflict only, look the existing profile up by email;
3. attach the profile to the configured list.

If the profile step is rejected with 401/403 the flow is replayed once
against the fallback revision (the second entry of ``Settings.revisions``).
Once a profile call has succeeded nothing is replayed; there is no other
retry.

:func:`subscribe` never raises.  Every outcome, including validation and
configuration problems, comes back as a
:class:`~email_capture.models.SubscriptionResult`.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Union

from email_capture.config import ExternalCredentials, Settings
from email_capture.errors import (
    ConfigurationError,
    ExternalServiceError,
    ValidationError,
)
from email_capture.klaviyo import ApiRevision
from email_capture.klaviyo.client import ApiResponse, KlaviyoClient
from email_capture.klaviyo.revisions import resolve_revisions
from email_capture.models import (
    ConfigErrorDiagnostic,
    EmailAddress,
    HttpErrorDiagnostic,
    NetworkErrorDiagnostic,
    SubscriptionRequest,
    SubscriptionResult,
    UnexpectedErrorDiagnostic,
)
from email_capture.validation import validate

LOGGER = logging.getLogger(__name__)

SUCCESS_MESSAGE = "Thank you for subscribing!"
CONFIG_ERROR_MESSAGE = "Server configuration error"
PROFILE_FAILURE_MESSAGE = "Failed to create subscriber profile. Please try again later."
LIST_FAILURE_MESSAGE = "Failed to subscribe. Please try again later."
NETWORK_FAILURE_MESSAGE = (
    "Network error when contacting the subscription service. Please try again later."
)
UNEXPECTED_FAILURE_MESSAGE = "An unexpected error occurred. Please try again later."

AUTH_FAILURE_STATUSES = frozenset({401, 403})
PROFILE_STEPS = frozenset({"create_profile", "find_profile"})
CONFLICT_STATUS = 409


def _http_failure(
    message: str, step: str, response: ApiResponse, revision: ApiRevision
) -> SubscriptionResult:
    LOGGER.warning("%s failed with status %s (revision %s)", step, response.status, revision.name)
    return SubscriptionResult(
        success=False,
        message=message,
        debug=HttpErrorDiagnostic(step=step, status=response.status, body=response.text),
        revision=revision.name,
    )


def _network_failure(exc: ExternalServiceError, revision: ApiRevision) -> SubscriptionResult:
    return SubscriptionResult(
        success=False,
        message=NETWORK_FAILURE_MESSAGE,
        debug=NetworkErrorDiagnostic(step=exc.step, detail=exc.detail),
        revision=revision.name,
    )


def _is_profile_auth_failure(result: SubscriptionResult) -> bool:
    """True when the profile step was rejected, before any call succeeded."""
    return (
        isinstance(result.debug, HttpErrorDiagnostic)
        and result.debug.step in PROFILE_STEPS
        and result.debug.status in AUTH_FAILURE_STATUSES
    )


def _resolve_profile_id(
    client: KlaviyoClient,
    revision: ApiRevision,
    credentials: ExternalCredentials,
    email: EmailAddress,
) -> Union[str, SubscriptionResult]:
    """Create the profile, falling back to a lookup on conflict.

    Returns the profile id, or the failed result that ends the flow.
    """
    created = client.create_profile(revision, credentials.api_key, email.value)
    if created.ok:
        profile_id = revision.profile_id_from_created(created.payload)
        if profile_id is None:
            return _http_failure(PROFILE_FAILURE_MESSAGE, "create_profile", created, revision)
        return profile_id

    if created.status != CONFLICT_STATUS:
        return _http_failure(PROFILE_FAILURE_MESSAGE, "create_profile", created, revision)

    LOGGER.info("Profile already exists; looking it up (revision %s)", revision.name)
    found = client.find_profile(revision, credentials.api_key, email.value)
    if not found.ok:
        return _http_failure(PROFILE_FAILURE_MESSAGE, "find_profile", found, revision)
    profile_id = revision.profile_id_from_lookup(found.payload)
    if profile_id is None:
        return _http_failure(PROFILE_FAILURE_MESSAGE, "find_profile", found, revision)
    return profile_id


def _run_flow(
    client: KlaviyoClient,
    revision: ApiRevision,
    credentials: ExternalCredentials,
    email: EmailAddress,
) -> SubscriptionResult:
    try:
        resolved = _resolve_profile_id(client, revision, credentials, email)
        if isinstance(resolved, SubscriptionResult):
            return resolved

        attached = client.attach_profile(
            revision, credentials.api_key, credentials.list_id, resolved
        )
    except ExternalServiceError as exc:
        return _network_failure(exc, revision)

    if not attached.ok:
        return _http_failure(LIST_FAILURE_MESSAGE, "attach_profile", attached, revision)

    LOGGER.info("Subscribed profile %s (revision %s)", resolved, revision.name)
    return SubscriptionResult(success=True, message=SUCCESS_MESSAGE, revision=revision.name)


def _subscribe_with_fallback(
    client: KlaviyoClient,
    revisions: List[ApiRevision],
    credentials: ExternalCredentials,
    email: EmailAddress,
) -> SubscriptionResult:
    primary = revisions[0]
    result = _run_flow(client, primary, credentials, email)
    if result.success or not _is_profile_auth_failure(result) or len(revisions) < 2:
        return result

    fallback = revisions[1]
    LOGGER.warning(
        "Revision %s rejected the API key; retrying once with %s",
        primary.name,
        fallback.name,
    )
    return _run_flow(client, fallback, credentials, email)


def subscribe(
    email: Union[str, EmailAddress, SubscriptionRequest, None],
    credentials: ExternalCredentials,
    *,
    settings: Optional[Settings] = None,
    client: Optional[KlaviyoClient] = None,
) -> SubscriptionResult:
    """Subscribe ``email`` to the list named in ``credentials``.

    Args:
        email: Raw form input, an already validated address, or a request.
        credentials: API key and list id, loaded once at startup.
        settings: Transport settings; library defaults when omitted.
        client: Transport to use.  A fresh one is created (and closed)
            when omitted.

    Returns:
        The outcome.  ``debug`` is set on failures and is meant for
        developers only.
    """
    if isinstance(email, SubscriptionRequest):
        address = email.email
    elif isinstance(email, EmailAddress):
        address = email
    else:
        try:
            address = validate(email)
        except ValidationError as exc:
            LOGGER.info("Rejected submission: %s", exc)
            return SubscriptionResult(success=False, message=str(exc))

    if not credentials.is_complete:
        LOGGER.error(
            "Cannot subscribe: marketing API credentials incomplete "
            "(api key set: %s, list id set: %s)",
            bool(credentials.api_key),
            bool(credentials.list_id),
        )
        return SubscriptionResult(
            success=False,
            message=CONFIG_ERROR_MESSAGE,
            debug=ConfigErrorDiagnostic(
                missing_api_key=not credentials.api_key,
                missing_list_id=not credentials.list_id,
            ),
        )

    settings = settings or Settings()
    owns_client = client is None
    try:
        revisions = resolve_revisions(settings.revisions)
        if not revisions:
            raise ConfigurationError("No API revision configured")
        if client is None:
            client = KlaviyoClient(settings.base_url, settings.timeout_seconds)
        return _subscribe_with_fallback(client, revisions, credentials, address)
    except ConfigurationError as exc:
        LOGGER.error("Cannot subscribe: %s", exc)
        return SubscriptionResult(success=False, message=CONFIG_ERROR_MESSAGE)
    except Exception as exc:  # noqa: BLE001
        LOGGER.exception("Unexpected error while subscribing")
        return SubscriptionResult(
            success=False,
            message=UNEXPECTED_FAILURE_MESSAGE,
            debug=UnexpectedErrorDiagnostic(detail=repr(exc)),
        )
    finally:
        if owns_client and client is not None:
            client.close()


__all__ = [
    "subscribe",
    "SUCCESS_MESSAGE",
    "CONFIG_ERROR_MESSAGE",
    "PROFILE_FAILURE_MESSAGE",
    "LIST_FAILURE_MESSAGE",
    "NETWORK_FAILURE_MESSAGE",
    "UNEXPECTED_FAILURE_MESSAGE",
]
