"""Streamlit landing page components.

``style`` holds the theme, ``email_form`` the public capture form and
``diagnostics_view`` the developer-only test page.
"""

from __future__ import annotations

from . import diagnostics_view
from . import email_form
from . import style


__all__ = ["diagnostics_view", "email_form", "style"]
