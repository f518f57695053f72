"""Entry point for the Streamlit landing page and the embedded API.

When executed with ``streamlit run email_capture/app.py`` this module
renders the KOA SPORT launch page with its email capture form.  A
background thread can launch the FastAPI server in the same process when
``RUN_API_WITH_STREAMLIT`` is set, and a developer diagnostics page is
added to the sidebar when ``EMAIL_CAPTURE_EXPOSE_DEBUG`` is set.
"""

from __future__ import annotations

import logging
import os
import sys
import threading
from typing import Optional

import streamlit as st
import uvicorn

# Ensure project root is on PYTHONPATH so imports like
# `email_capture.landing` work under `streamlit run`
root_dir = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, root_dir)

from email_capture.config import get_credentials, get_settings  # noqa: E402
from email_capture.landing import diagnostics_view, email_form, style  # noqa: E402

LOGGER = logging.getLogger(__name__)

PAGE_TITLE = "KOA SPORT | Performance Mineral Sunscreen"
PRODUCT_LINES = ("Performance", "Mineral Sunscreen", "06.25")

_API_THREAD: Optional[threading.Thread] = None


def _start_api_server() -> None:
    """Start the FastAPI server in a background thread (once per process)."""
    global _API_THREAD
    if _API_THREAD is not None and _API_THREAD.is_alive():
        return

    def _run_server() -> None:
        from email_capture.api.server import create_app

        port = int(os.environ.get("EMAIL_CAPTURE_API_PORT", "8000"))
        uvicorn.run(create_app(), host="0.0.0.0", port=port, log_level="info")

    _API_THREAD = threading.Thread(target=_run_server, name="email-capture-api", daemon=True)
    _API_THREAD.start()


def _render_landing() -> None:
    st.markdown("# KOA SPORT")
    lines = "".join(f"<p>{line}</p>" for line in PRODUCT_LINES)
    st.markdown(f'<div class="koa-copy">{lines}</div>', unsafe_allow_html=True)

    email_form.render_email_form(get_credentials(), get_settings())


def _load_env_from_secrets() -> None:
    """Copy Streamlit secrets into ``os.environ`` for Streamlit Cloud.

    Existing environment variables win over secrets.
    """
    names = (
        "KLAVIYO_API_KEY",
        "KLAVIYO_LIST_ID",
        "KLAVIYO_BASE_URL",
        "KLAVIYO_TIMEOUT_SECONDS",
        "KLAVIYO_REVISIONS",
        "EMAIL_CAPTURE_EXPOSE_DEBUG",
    )
    try:
        for name in names:
            if name in st.secrets and not os.environ.get(name):
                os.environ[name] = str(st.secrets[name])
    except FileNotFoundError:
        LOGGER.debug("No Streamlit secrets file; using the environment only")


def main() -> None:
    """Render the landing page and optionally launch the API."""
    st.set_page_config(page_title=PAGE_TITLE, layout="centered")
    style.apply_theme()
    _load_env_from_secrets()

    if os.environ.get("RUN_API_WITH_STREAMLIT", "false").lower() in {"1", "true", "yes"}:
        _start_api_server()

    settings = get_settings()
    page = "Landing"
    if settings.expose_debug:
        page = st.sidebar.selectbox("Navigate", ("Landing", "Diagnostics"), key="nav")

    if page == "Diagnostics":
        diagnostics_view.render_diagnostics_view(get_credentials(), settings)
    else:
        _render_landing()


if __name__ == "__main__":
    main()
