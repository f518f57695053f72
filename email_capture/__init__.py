"""Top-level package for the landing page email capture.

This package validates the addresses submitted through the launch page
form and relays them to the marketing platform, where a subscriber profile
is created (or found) and attached to the launch list.  Subpackages handle
the platform API (``klaviyo``), the web API (``api``) and the Streamlit
landing page (``landing``).

The ``__all__`` variable enumerates the primary public modules for
convenience when using ``from email_capture import ...``.
"""

from __future__ import annotations

__all__ = [
    "app",
    "api",
    "config",
    "diagnostics",
    "klaviyo",
    "landing",
    "models",
    "subscription",
    "validation",
]

# SemVer version of the package
__version__: str = "0.1.0"
