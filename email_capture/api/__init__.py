"""HTTP entry points.

``server`` exposes the form submission endpoint and the developer
diagnostics as a FastAPI application.
"""

from __future__ import annotations

__all__ = ["server"]
