"""HTTP transport for the marketing platform.

``KlaviyoClient`` performs single requests and hands back an
:class:`ApiResponse` whatever the status code: deciding what a 409 or a
401 means is the workflow's job.  Response bodies are decoded leniently;
an empty or non-JSON body yields ``payload=None`` while the raw text is
kept for diagnostics.

Every request carries an explicit timeout so a slow upstream cannot hang
the caller.  Connection problems surface as
:class:`~email_capture.errors.ExternalServiceError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

from email_capture.config import DEFAULT_BASE_URL, DEFAULT_TIMEOUT_SECONDS
from email_capture.errors import ExternalServiceError
from email_capture.klaviyo import ApiRevision

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class ApiResponse:
    status: int
    text: str
    payload: Any = None

    @property
    def ok(self) -> bool:
        return 200 <= self.status < 300

    @classmethod
    def from_response(cls, response: requests.Response) -> "ApiResponse":
        text = response.text or ""
        payload: Any = None
        if text.strip():
            try:
                payload = response.json()
            except ValueError:
                LOGGER.warning(
                    "Non-JSON body from %s (status %s)", response.url, response.status_code
                )
        return cls(status=response.status_code, text=text, payload=payload)


class KlaviyoClient:
    """Minimal client for the endpoints the subscription flow needs."""

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        session: Optional[requests.Session] = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout_seconds
        self._session = session or requests.Session()

    def _request(
        self,
        step: str,
        method: str,
        path: str,
        revision: ApiRevision,
        api_key: str,
        *,
        params: Optional[Dict[str, str]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> ApiResponse:
        url = f"{self._base_url}{path}"
        LOGGER.debug("%s: %s %s (revision %s)", step, method, url, revision.name)
        try:
            response = self._session.request(
                method,
                url,
                headers=revision.headers(api_key),
                params=params,
                json=json,
                timeout=self._timeout,
            )
        except requests.RequestException as exc:
            LOGGER.warning("%s: request to %s failed: %s", step, url, exc)
            raise ExternalServiceError(step, str(exc)) from exc
        result = ApiResponse.from_response(response)
        LOGGER.debug("%s: status %s", step, result.status)
        return result

    def create_profile(self, revision: ApiRevision, api_key: str, email: str) -> ApiResponse:
        return self._request(
            "create_profile",
            "POST",
            revision.profiles_path(),
            revision,
            api_key,
            json=revision.profile_payload(email),
        )

    def find_profile(self, revision: ApiRevision, api_key: str, email: str) -> ApiResponse:
        return self._request(
            "find_profile",
            "GET",
            revision.profiles_path(),
            revision,
            api_key,
            params=revision.lookup_params(email),
        )

    def attach_profile(
        self, revision: ApiRevision, api_key: str, list_id: str, profile_id: str
    ) -> ApiResponse:
        return self._request(
            "attach_profile",
            "POST",
            revision.list_profiles_path(list_id),
            revision,
            api_key,
            json=revision.attachment_payload(profile_id),
        )

    def get_list(self, revision: ApiRevision, api_key: str, list_id: str) -> ApiResponse:
        """Fetch the list resource; used by the diagnostic endpoints."""
        return self._request(
            "get_list", "GET", revision.list_path(list_id), revision, api_key
        )

    def close(self) -> None:
        self._session.close()


__all__ = ["ApiResponse", "KlaviyoClient"]
