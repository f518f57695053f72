"""Process-wide configuration read from the environment.

Environment variables used:

* ``KLAVIYO_API_KEY`` – private API key for the marketing platform
* ``KLAVIYO_LIST_ID`` – identifier of the list new subscribers join
* ``KLAVIYO_BASE_URL`` – optional; defaults to the official API
* ``KLAVIYO_TIMEOUT_SECONDS`` – per-request timeout, defaults to 5
* ``KLAVIYO_REVISIONS`` – comma separated API revisions, primary first;
  the second entry is used as the fallback on authorization errors
* ``EMAIL_CAPTURE_EXPOSE_DEBUG`` – when truthy ("1", "true", "yes") the web
  API includes diagnostic payloads in its responses

Values are read once and cached; business logic receives them as explicit
arguments and never reads ``os.environ`` itself.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

from email_capture.errors import ConfigurationError
from email_capture.klaviyo.revisions import get_revision

LOGGER = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://a.klaviyo.com/api"
DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_REVISIONS: Tuple[str, ...] = ("2023-10-15", "2023-02-22")

_TRUTHY = {"1", "true", "yes"}


def mask_secret(secret: Optional[str]) -> Optional[str]:
    """Return ``abc...xyz`` for display; short secrets are fully hidden."""
    if not secret:
        return None
    if len(secret) <= 8:
        return "***"
    return f"{secret[:3]}...{secret[-3:]}"


@dataclass(frozen=True)
class ExternalCredentials:
    """API key and target list for the marketing platform."""

    api_key: str = ""
    list_id: str = ""

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ExternalCredentials":
        env = os.environ if environ is None else environ
        return cls(
            api_key=(env.get("KLAVIYO_API_KEY") or "").strip(),
            list_id=(env.get("KLAVIYO_LIST_ID") or "").strip(),
        )

    @property
    def is_complete(self) -> bool:
        return bool(self.api_key) and bool(self.list_id)

    def masked_api_key(self) -> Optional[str]:
        return mask_secret(self.api_key)

    def __repr__(self) -> str:
        return (
            f"ExternalCredentials(api_key={self.masked_api_key()!r}, "
            f"list_id={self.list_id!r})"
        )


@dataclass(frozen=True)
class Settings:
    """Transport and presentation settings."""

    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    revisions: Tuple[str, ...] = DEFAULT_REVISIONS
    expose_debug: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        """Build settings from environment variables.

        Raises:
            ConfigurationError: If the timeout is not a positive number, no
                revision is listed, or a listed revision is unknown.
        """
        env = os.environ if environ is None else environ

        raw_timeout = env.get("KLAVIYO_TIMEOUT_SECONDS") or str(DEFAULT_TIMEOUT_SECONDS)
        try:
            timeout = float(raw_timeout)
        except ValueError as exc:
            raise ConfigurationError(
                f"KLAVIYO_TIMEOUT_SECONDS must be a number, got {raw_timeout!r}"
            ) from exc
        if timeout <= 0:
            raise ConfigurationError("KLAVIYO_TIMEOUT_SECONDS must be positive")

        raw_revisions = env.get("KLAVIYO_REVISIONS")
        if raw_revisions:
            revisions = tuple(r.strip() for r in raw_revisions.split(",") if r.strip())
            if not revisions:
                raise ConfigurationError("KLAVIYO_REVISIONS lists no revision")
        else:
            revisions = DEFAULT_REVISIONS
        for name in revisions:
            get_revision(name)

        return cls(
            base_url=(env.get("KLAVIYO_BASE_URL") or DEFAULT_BASE_URL).rstrip("/"),
            timeout_seconds=timeout,
            revisions=revisions,
            expose_debug=env.get("EMAIL_CAPTURE_EXPOSE_DEBUG", "").lower() in _TRUTHY,
        )


_CREDENTIALS: ExternalCredentials | None = None
_SETTINGS: Settings | None = None


def get_credentials() -> ExternalCredentials:
    """Load (once) and return the credentials from the environment."""
    global _CREDENTIALS
    if _CREDENTIALS is None:
        _CREDENTIALS = ExternalCredentials.from_env()
        if not _CREDENTIALS.is_complete:
            LOGGER.error(
                "Marketing API credentials incomplete (api key set: %s, list id set: %s)",
                bool(_CREDENTIALS.api_key),
                bool(_CREDENTIALS.list_id),
            )
    return _CREDENTIALS


def get_settings() -> Settings:
    """Load (once) and return the settings from the environment."""
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS


def reset_cache() -> None:
    """Forget cached configuration so the next access re-reads the env."""
    global _CREDENTIALS, _SETTINGS
    _CREDENTIALS = None
    _SETTINGS = None


__all__ = [
    "ExternalCredentials",
    "Settings",
    "get_credentials",
    "get_settings",
    "reset_cache",
    "mask_secret",
]
