"""Developer diagnostics shared by the web API and the landing page.

These helpers answer "is this deployment wired up correctly?" without ever
revealing the API key: only a masked prefix/suffix is reported.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from email_capture.config import ExternalCredentials, Settings
from email_capture.errors import ConfigurationError, ExternalServiceError
from email_capture.klaviyo.client import KlaviyoClient
from email_capture.klaviyo.revisions import get_revision


def check_list(
    client: KlaviyoClient, settings: Settings, credentials: ExternalCredentials
) -> Dict[str, Any]:
    """Fetch the configured list with the primary revision.

    The result always has ``success``; ``status`` is present only when the
    platform answered, ``config_error`` only when no request could be built.
    """
    try:
        if not settings.revisions:
            raise ConfigurationError("No API revision configured")
        revision = get_revision(settings.revisions[0])
    except ConfigurationError as exc:
        return {"success": False, "config_error": True, "error": str(exc)}
    try:
        response = client.get_list(revision, credentials.api_key, credentials.list_id)
    except ExternalServiceError as exc:
        return {"success": False, "error": exc.detail}
    data: Any = response.payload
    if data is None:
        data = {"error": "Could not parse response as JSON", "body": response.text}
    return {
        "success": response.ok,
        "status": response.status,
        "revision": revision.name,
        "data": data,
        "summary": revision.list_summary(response.payload) if response.ok else None,
    }


def environment_report(
    credentials: ExternalCredentials,
    settings: Settings,
    client: Optional[KlaviyoClient] = None,
) -> Dict[str, Any]:
    """Describe the configuration; check the list when a client is given."""
    api_test: Optional[Dict[str, Any]] = None
    if credentials.is_complete and client is not None:
        api_test = check_list(client, settings, credentials)
    return {
        "has_api_key": bool(credentials.api_key),
        "has_list_id": bool(credentials.list_id),
        "api_key_prefix": credentials.masked_api_key(),
        "list_id": credentials.list_id or None,
        "revisions": list(settings.revisions),
        "api_test": api_test,
    }


__all__ = ["check_list", "environment_report"]
