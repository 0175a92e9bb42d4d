"""Streamlit entry point for the TravelSynth application."""
from __future__ import annotations

import logging
import os

import streamlit as st
from dotenv import load_dotenv

from travelsynth.ui import ensure_guide_state, render_guide_page


def configure() -> None:
    """Configure global Streamlit settings, logging and environment variables."""

    load_dotenv()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    st.set_page_config(page_title="TravelSynthesizer AI", layout="wide")


def render() -> None:
    """Render the TravelSynth page shell."""

    ensure_guide_state()

    title_column, caption_column = st.columns([5, 1])
    title_column.title("🧭 TravelSynthesizer AI")
    caption_column.caption("Powered by Gemini")

    render_guide_page()


if __name__ == "__main__":
    configure()
    render()
