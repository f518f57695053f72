"""Developer diagnostics page.

Lets a developer check the environment (masked key, list id, live list
check) and run a subscription with full diagnostic output.  Not linked from
the public landing page; reachable through the sidebar only when
``EMAIL_CAPTURE_EXPOSE_DEBUG`` is enabled.
"""

from __future__ import annotations

import streamlit as st

from email_capture.config import ExternalCredentials, Settings
from email_capture.diagnostics import environment_report
from email_capture.klaviyo.client import KlaviyoClient
from email_capture.subscription import subscribe


def render_diagnostics_view(credentials: ExternalCredentials, settings: Settings) -> None:
    st.markdown("## Subscription diagnostics")

    if st.button("Check environment variables"):
        client = KlaviyoClient(settings.base_url, settings.timeout_seconds)
        try:
            st.session_state["diag_env"] = environment_report(credentials, settings, client)
        finally:
            client.close()
    if "diag_env" in st.session_state:
        st.json(st.session_state["diag_env"])

    with st.form("diag_subscribe"):
        email = st.text_input("Email", placeholder="test@example.com")
        submitted = st.form_submit_button("Test subscribe")
    if submitted:
        with st.spinner("Testing..."):
            result = subscribe(email, credentials, settings=settings)
        st.session_state["diag_result"] = result.to_dict()
    if "diag_result" in st.session_state:
        st.json(st.session_state["diag_result"])


__all__ = ["render_diagnostics_view"]
