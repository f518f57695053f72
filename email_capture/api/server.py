"""Web API for the landing page form and its diagnostics.

This module exposes a typed API using FastAPI.  The form posts to
``/subscribe``; the ``/api/test-*`` routes help a developer check the
deployment's credentials against the marketing platform.  The server can
be run standalone::

    uvicorn email_capture.api.server:app --reload

or embedded inside the Streamlit landing page through :func:`create_app`.

Credentials and settings are read from the environment once, when the
application is created.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from email_capture.config import ExternalCredentials, Settings, get_credentials, get_settings
from email_capture.diagnostics import check_list, environment_report
from email_capture.klaviyo.client import KlaviyoClient
from email_capture.subscription import subscribe

LOGGER = logging.getLogger(__name__)


class SubscribeRequest(BaseModel):
    # Untyped: the validator owns every rejection and its user-facing message.
    email: Optional[Any] = None


class SubscribeResponse(BaseModel):
    success: bool
    message: str
    debug: Optional[Dict[str, Any]] = None
    revision: Optional[str] = None


def _client(request: Request) -> KlaviyoClient:
    settings: Settings = request.app.state.settings
    factory = getattr(request.app.state, "client_factory", None)
    if factory is not None:
        return factory()
    return KlaviyoClient(settings.base_url, settings.timeout_seconds)


def create_app(
    credentials: Optional[ExternalCredentials] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Return a configured FastAPI application.

    Args:
        credentials: Defaults to the values cached from the environment.
        settings: Defaults to the values cached from the environment.
    """
    application = FastAPI(title="Email Capture API")
    application.state.credentials = credentials or get_credentials()
    application.state.settings = settings or get_settings()
    application.state.client_factory = None

    @application.get("/healthz", summary="Liveness check")
    async def healthz() -> Dict[str, str]:
        return {"status": "ok"}

    @application.post(
        "/subscribe", response_model=SubscribeResponse, summary="Subscribe an email"
    )
    def subscribe_email(body: SubscribeRequest, request: Request) -> SubscribeResponse:
        """Relay the submitted email to the marketing list.

        Handled outcomes always return 200; ``success`` carries the result.
        """
        state = request.app.state
        client = _client(request)
        try:
            result = subscribe(
                body.email, state.credentials, settings=state.settings, client=client
            )
        finally:
            client.close()
        return SubscribeResponse(**result.to_dict(include_debug=state.settings.expose_debug))

    @application.get("/api/test-klaviyo", summary="Report configuration")
    def test_klaviyo(request: Request) -> Dict[str, Any]:
        """Report which credentials are present and check the list."""
        state = request.app.state
        client = _client(request)
        try:
            return environment_report(state.credentials, state.settings, client)
        finally:
            client.close()

    @application.get("/api/test-klaviyo-direct", summary="Check the list")
    def test_klaviyo_direct(request: Request) -> JSONResponse:
        state = request.app.state
        credentials: ExternalCredentials = state.credentials
        if not credentials.is_complete:
            return JSONResponse(
                {"success": False, "error": "Missing API key or list ID"}, status_code=500
            )
        client = _client(request)
        try:
            outcome = check_list(client, state.settings, credentials)
        finally:
            client.close()
        if outcome.get("config_error"):
            return JSONResponse(outcome, status_code=500)
        if "status" not in outcome:
            return JSONResponse(outcome, status_code=502)
        if not outcome["success"]:
            return JSONResponse(
                {"success": False, "status": outcome["status"], "error": outcome["data"]},
                status_code=outcome["status"],
            )
        summary = outcome["summary"] or {}
        return JSONResponse(
            {
                "success": True,
                "list_name": summary.get("name"),
                "list_id": summary.get("id"),
                "created": summary.get("created"),
            }
        )

    @application.get("/api/test-subscribe", summary="Subscribe a generated address")
    def test_subscribe(request: Request) -> JSONResponse:
        """Run the full flow for ``test-<millis>@example.com``."""
        state = request.app.state
        credentials: ExternalCredentials = state.credentials
        if not credentials.is_complete:
            return JSONResponse(
                {"success": False, "error": "Missing API key or list ID"}, status_code=500
            )
        test_email = f"test-{int(time.time() * 1000)}@example.com"
        client = _client(request)
        try:
            result = subscribe(test_email, credentials, settings=state.settings, client=client)
        finally:
            client.close()
        LOGGER.info("Test subscription for %s: success=%s", test_email, result.success)
        return JSONResponse({"test_email": test_email, **result.to_dict()})

    return application


app = create_app()


__all__ = ["app", "create_app", "SubscribeRequest", "SubscribeResponse"]
