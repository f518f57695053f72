"""Email capture form for the landing page.

The Streamlit widget only collects input and renders the outcome; the
decision logic lives in :func:`handle_submission` so it can be exercised
without a Streamlit runtime.  The same validator as the server runs first,
so a malformed address never costs a round trip to the marketing API.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from typing import Literal, Optional

import streamlit as st

from email_capture.config import ExternalCredentials, Settings
from email_capture.errors import ValidationError
from email_capture.klaviyo.client import KlaviyoClient
from email_capture.subscription import subscribe
from email_capture.validation import validate

LOGGER = logging.getLogger(__name__)

Status = Literal["idle", "success", "error"]


@dataclass(frozen=True)
class FormState:
    status: Status = "idle"
    message: str = ""
    clear_input: bool = False


def handle_submission(
    raw_email: Optional[str],
    credentials: ExternalCredentials,
    settings: Optional[Settings] = None,
    client: Optional[KlaviyoClient] = None,
) -> FormState:
    """Validate and subscribe ``raw_email``; return what the form shows next."""
    try:
        email = validate(raw_email)
    except ValidationError as exc:
        return FormState(status="error", message=str(exc))

    result = subscribe(email, credentials, settings=settings, client=client)
    if result.success:
        return FormState(status="success", message=result.message, clear_input=True)
    return FormState(status="error", message=result.message or "Failed to subscribe")


def render_email_form(credentials: ExternalCredentials, settings: Settings) -> None:
    """Render the "Run with us" form and its status line."""
    state: FormState = st.session_state.get("email_form_state", FormState())

    with st.form("email_form", clear_on_submit=False):
        st.markdown('<div class="koa-form-title">Run with us</div>', unsafe_allow_html=True)
        email = st.text_input(
            "Email address",
            key="email_input",
            placeholder="EMAIL ADDRESS",
            label_visibility="collapsed",
        )
        submitted = st.form_submit_button("Submit")

    if submitted:
        with st.spinner("Submitting..."):
            state = handle_submission(email, credentials, settings)
        st.session_state["email_form_state"] = state
        if state.clear_input:
            # Widget values can only be reset before the widget is built.
            del st.session_state["email_input"]
            st.rerun()

    if state.message:
        st.markdown(
            f'<div class="koa-status {state.status}" role="status" aria-live="polite">'
            f"{html.escape(state.message)}</div>",
            unsafe_allow_html=True,
        )


__all__ = ["FormState", "handle_submission", "render_email_form"]
