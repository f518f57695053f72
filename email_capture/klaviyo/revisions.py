"""Concrete API revisions.

``2023-10-15`` is the revision the landing page targets.  ``2023-02-22`` is
the older revision kept as the fallback when a key is rejected by the
newer one (keys minted for an older integration can be scoped to it).
Both speak JSON:API; the older one predates the ``page[size]`` parameter
on profile lookups and nests list timestamps differently.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

from email_capture.errors import ConfigurationError
from email_capture.klaviyo import ApiRevision


def _first_resource(payload: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(payload, dict):
        return None
    data = payload.get("data")
    if isinstance(data, list):
        data = data[0] if data else None
    return data if isinstance(data, dict) else None


def _resource_id(resource: Optional[Dict[str, Any]]) -> Optional[str]:
    if resource is None:
        return None
    value = resource.get("id")
    if value is None or value == "":
        return None
    return str(value)


class Revision20231015(ApiRevision):
    """Primary revision."""

    name = "2023-10-15"

    def profiles_path(self) -> str:
        return "/profiles/"

    def list_profiles_path(self, list_id: str) -> str:
        return f"/lists/{list_id}/relationships/profiles/"

    def list_path(self, list_id: str) -> str:
        return f"/lists/{list_id}/"

    def profile_payload(self, email: str) -> Dict[str, Any]:
        return {"data": {"type": "profile", "attributes": {"email": email}}}

    def lookup_params(self, email: str) -> Dict[str, str]:
        escaped = email.replace('"', '\\"')
        return {"filter": f'equals(email,"{escaped}")', "page[size]": "1"}

    def attachment_payload(self, profile_id: str) -> Dict[str, Any]:
        return {"data": [{"type": "profile", "id": profile_id}]}

    def profile_id_from_created(self, payload: Any) -> Optional[str]:
        return _resource_id(_first_resource(payload))

    def profile_id_from_lookup(self, payload: Any) -> Optional[str]:
        return _resource_id(_first_resource(payload))

    def list_summary(self, payload: Any) -> Dict[str, Any]:
        resource = _first_resource(payload) or {}
        attributes = resource.get("attributes") or {}
        return {
            "name": attributes.get("name"),
            "id": _resource_id(resource),
            "created": attributes.get("created"),
        }


class Revision20230222(Revision20231015):
    """Older fallback revision."""

    name = "2023-02-22"

    def lookup_params(self, email: str) -> Dict[str, str]:
        escaped = email.replace('"', '\\"')
        return {"filter": f'equals(email,"{escaped}")'}

    def list_summary(self, payload: Any) -> Dict[str, Any]:
        summary = super().list_summary(payload)
        if summary["created"] is None:
            resource = _first_resource(payload) or {}
            summary["created"] = (resource.get("meta") or {}).get("created")
        return summary


_REGISTRY: Dict[str, type] = {
    Revision20231015.name: Revision20231015,
    Revision20230222.name: Revision20230222,
}


def get_revision(name: str) -> ApiRevision:
    """Return the revision registered under ``name``.

    Raises:
        ConfigurationError: If the revision is unknown.
    """
    try:
        return _REGISTRY[name]()
    except KeyError as exc:
        known = ", ".join(sorted(_REGISTRY))
        raise ConfigurationError(
            f"Unknown API revision {name!r}; known revisions: {known}"
        ) from exc


def resolve_revisions(names: Iterable[str]) -> List[ApiRevision]:
    return [get_revision(name) for name in names]


__all__ = [
    "Revision20231015",
    "Revision20230222",
    "get_revision",
    "resolve_revisions",
]
