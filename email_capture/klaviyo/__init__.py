"""Abstract interface for the marketing platform's API revisions.

The platform versions its REST API by date (sent in a ``revision``
header).  Breaking changes between revisions affect request paths, payload
shapes and where identifiers live in the responses.  Everything that varies
per revision sits behind :class:`ApiRevision`, so the subscription workflow
in :mod:`email_capture.subscription` never touches a raw payload and a new
revision means one new subclass in :mod:`email_capture.klaviyo.revisions`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ApiRevision(ABC):
    """Request/response shaping for one dated API revision."""

    #: Value of the ``revision`` header, e.g. ``"2023-10-15"``.
    name: str = ""

    def headers(self, api_key: str) -> Dict[str, str]:
        """Return the headers every call of this revision carries."""
        return {
            "Authorization": f"Klaviyo-API-Key {api_key}",
            "Accept": "application/json",
            "Content-Type": "application/json",
            "revision": self.name,
        }

    @abstractmethod
    def profiles_path(self) -> str:
        """Path of the profile collection, relative to the base URL."""
        raise NotImplementedError

    @abstractmethod
    def list_profiles_path(self, list_id: str) -> str:
        """Path used to attach profiles to ``list_id``."""
        raise NotImplementedError

    @abstractmethod
    def list_path(self, list_id: str) -> str:
        raise NotImplementedError

    @abstractmethod
    def profile_payload(self, email: str) -> Dict[str, Any]:
        """Body of the create-profile request."""
        raise NotImplementedError

    @abstractmethod
    def lookup_params(self, email: str) -> Dict[str, str]:
        """Query parameters of the lookup-by-email request."""
        raise NotImplementedError

    @abstractmethod
    def attachment_payload(self, profile_id: str) -> Dict[str, Any]:
        """Body of the add-profile-to-list request."""
        raise NotImplementedError

    @abstractmethod
    def profile_id_from_created(self, payload: Any) -> Optional[str]:
        """Extract the profile id from a create-profile response body.

        ``payload`` is the decoded JSON body or ``None``.  Implementations
        must return ``None`` rather than raise on unexpected shapes.
        """
        raise NotImplementedError

    @abstractmethod
    def profile_id_from_lookup(self, payload: Any) -> Optional[str]:
        """Extract the first matching profile id from a lookup response."""
        raise NotImplementedError

    @abstractmethod
    def list_summary(self, payload: Any) -> Dict[str, Any]:
        """Return ``name``, ``id`` and ``created`` of a list response."""
        raise NotImplementedError

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


__all__ = ["ApiRevision"]
