import re
from dataclasses import replace

import pytest
from fastapi.testclient import TestClient

from conftest import BASE_URL, FakeSession, lookup_body, profile_body
from email_capture.api.server import create_app
from email_capture.config import ExternalCredentials
from email_capture.klaviyo.client import KlaviyoClient


def make_client(credentials, settings, session: FakeSession) -> TestClient:
    application = create_app(credentials=credentials, settings=settings)
    application.state.client_factory = lambda: KlaviyoClient(BASE_URL, 3.0, session=session)
    return TestClient(application)


@pytest.fixture
def api(credentials, settings, session) -> TestClient:
    return make_client(credentials, settings, session)


def test_healthz(api) -> None:
    assert api.get("/healthz").json() == {"status": "ok"}


def test_subscribe_success(api, session) -> None:
    session.queue(201, profile_body("01PROFILE")).queue(204)

    response = api.post("/subscribe", json={"email": "user@example.com"})

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "message": "Thank you for subscribing!",
        "debug": None,
        "revision": None,
    }


def test_subscribe_conflict_recovers(api, session) -> None:
    session.queue(409).queue(200, lookup_body("01EXISTING")).queue(204)

    response = api.post("/subscribe", json={"email": "user@example.com"})

    assert response.json()["success"] is True
    assert len(session.calls) == 3


def test_subscribe_invalid_email(api, session) -> None:
    response = api.post("/subscribe", json={"email": "not-an-email"})

    assert response.status_code == 200
    assert response.json()["message"] == "Please enter a valid email address"
    assert session.calls == []


def test_subscribe_missing_email(api, session) -> None:
    response = api.post("/subscribe", json={})

    assert response.json()["message"] == "Please enter your email address"
    assert session.calls == []


def test_debug_hidden_by_default(api, session) -> None:
    session.queue(500, "upstream body")

    body = api.post("/subscribe", json={"email": "user@example.com"}).json()

    assert body["success"] is False
    assert body["debug"] is None


def test_debug_exposed_when_enabled(credentials, settings, session) -> None:
    api = make_client(credentials, replace(settings, expose_debug=True), session)
    session.queue(500, "upstream body")

    body = api.post("/subscribe", json={"email": "user@example.com"}).json()

    assert body["debug"] == {
        "kind": "http_error",
        "step": "create_profile",
        "status": 500,
        "body": "upstream body",
    }
    assert body["revision"] == "2023-10-15"


def test_subscribe_without_credentials(settings, session) -> None:
    api = make_client(ExternalCredentials(), settings, session)

    body = api.post("/subscribe", json={"email": "user@example.com"}).json()

    assert body == {
        "success": False,
        "message": "Server configuration error",
        "debug": None,
        "revision": None,
    }
    assert session.calls == []


def test_environment_report_masks_key(api, session, credentials) -> None:
    session.queue(200, {"data": {"id": "LIST123", "attributes": {"name": "Launch"}}})

    body = api.get("/api/test-klaviyo").json()

    assert body["has_api_key"] is True
    assert body["has_list_id"] is True
    assert body["api_key_prefix"] == "pk_...def"
    assert credentials.api_key not in str(body)
    assert body["api_test"]["success"] is True
    assert body["api_test"]["summary"]["name"] == "Launch"
    assert session.calls[0].path == "/lists/LIST123/"


def test_environment_report_without_credentials(settings, session) -> None:
    api = make_client(ExternalCredentials(), settings, session)

    body = api.get("/api/test-klaviyo").json()

    assert body["has_api_key"] is False
    assert body["api_key_prefix"] is None
    assert body["api_test"] is None
    assert session.calls == []


def test_direct_list_check_success(api, session) -> None:
    session.queue(
        200,
        {"data": {"id": "LIST123", "attributes": {"name": "Launch", "created": "2025-05-01"}}},
    )

    response = api.get("/api/test-klaviyo-direct")

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "list_name": "Launch",
        "list_id": "LIST123",
        "created": "2025-05-01",
    }


def test_direct_list_check_mirrors_upstream_status(api, session) -> None:
    session.queue(401, {"errors": [{"code": "not_authenticated"}]})

    response = api.get("/api/test-klaviyo-direct")

    assert response.status_code == 401
    assert response.json()["success"] is False


def test_direct_list_check_unconfigured(settings, session) -> None:
    api = make_client(ExternalCredentials(), settings, session)

    response = api.get("/api/test-klaviyo-direct")

    assert response.status_code == 500
    assert response.json()["error"] == "Missing API key or list ID"


def test_test_subscribe_uses_generated_address(api, session) -> None:
    session.queue(201, profile_body("01PROFILE")).queue(204)

    body = api.get("/api/test-subscribe").json()

    assert re.fullmatch(r"test-\d+@example\.com", body["test_email"])
    assert body["success"] is True
    sent = session.calls[0].kwargs["json"]["data"]["attributes"]["email"]
    assert sent == body["test_email"]


@pytest.mark.parametrize("value", [42, ["user@example.com"], {"address": "user@example.com"}])
def test_subscribe_non_string_email_gets_validator_message(api, session, value) -> None:
    response = api.post("/subscribe", json={"email": value})

    assert response.status_code == 200
    assert response.json()["success"] is False
    assert response.json()["message"] == "Please enter your email address"
    assert session.calls == []


def test_environment_report_with_unknown_revision(credentials, settings, session) -> None:
    api = make_client(credentials, replace(settings, revisions=("bogus",)), session)

    response = api.get("/api/test-klaviyo")

    assert response.status_code == 200
    api_test = response.json()["api_test"]
    assert api_test["success"] is False
    assert "bogus" in api_test["error"]
    assert session.calls == []


def test_direct_list_check_with_unknown_revision(credentials, settings, session) -> None:
    api = make_client(credentials, replace(settings, revisions=("bogus",)), session)

    response = api.get("/api/test-klaviyo-direct")

    assert response.status_code == 500
    assert response.json()["success"] is False
    assert session.calls == []
