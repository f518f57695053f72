"""Landing page styling configuration.

Dark theme matching the KOA SPORT launch page: black background, grey
rounded form card and the signature neon green accent.  Colours are kept
in :class:`Theme` so the form and diagnostics views can reuse them.
"""

from __future__ import annotations

from dataclasses import dataclass

import streamlit as st


@dataclass
class Theme:
    """Configuration values for the landing page's appearance."""

    background: str = "#000000"
    text: str = "#FFFFFF"
    card: str = "#777777"
    input_background: str = "#E0E0E0"
    accent: str = "#5EFF45"
    error: str = "#F87171"
    font: str = "Helvetica, Arial, sans-serif"
    max_width_px: int = 448


THEME = Theme()


def apply_theme(theme: Theme = THEME) -> None:
    """Inject the landing page CSS into the Streamlit app."""
    st.markdown(
        f"""
<style>
:root {{
  --bg: {theme.background};
  --text: {theme.text};
  --card: {theme.card};
  --input-bg: {theme.input_background};
  --accent: {theme.accent};
  --error: {theme.error};
}}

html, body, .stApp {{
  background: var(--bg) !important;
  color: var(--text) !important;
  font-family: {theme.font};
}}
.block-container {{
  max-width: {theme.max_width_px}px;
  padding-top: 3rem;
}}
h1, h2, h3, p {{ color: var(--text) !important; text-align: center; }}

/* ========= Product copy ========= */
.koa-copy {{
  text-transform: uppercase;
  letter-spacing: .2em;
  font-size: .875rem;
  font-weight: 300;
  text-align: center;
  margin: 2rem 0;
}}
.koa-copy p {{ margin: 0; }}

/* ========= Form card ========= */
[data-testid="stForm"] {{
  background: var(--card) !important;
  border: none !important;
  border-radius: 1.5rem !important;
  padding: .5rem !important;
}}
.koa-form-title {{
  color: var(--accent) !important;
  text-transform: uppercase;
  letter-spacing: .1em;
  font-size: .875rem;
  font-weight: 300;
  text-align: center;
  margin-bottom: .5rem;
}}
.stTextInput input {{
  background: var(--input-bg) !important;
  color: #000000 !important;
  border-radius: 9999px !important;
  text-align: center;
}}
.stFormSubmitButton > button, .stButton > button {{
  width: 100%;
  background: var(--accent) !important;
  color: #000000 !important;
  border: none !important;
  border-radius: 9999px !important;
  text-transform: uppercase;
  letter-spacing: .1em;
}}

/* ========= Status line ========= */
.koa-status {{ text-align: center; font-size: .875rem; margin-top: .5rem; }}
.koa-status.success {{ color: var(--accent); }}
.koa-status.error {{ color: var(--error); }}
</style>
        """,
        unsafe_allow_html=True,
    )
