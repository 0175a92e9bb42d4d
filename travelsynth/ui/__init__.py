"""TravelSynth Streamlit UI helpers."""

from __future__ import annotations

from .guide import ensure_guide_state, render_guide_page
from .url_inputs import render_url_inputs

__all__ = [
    "ensure_guide_state",
    "render_guide_page",
    "render_url_inputs",
]
