"""Core utilities for TravelSynth."""

from .markdown import markdown_to_html, parse_markdown, render_html, split_bold

__all__ = [
    "markdown_to_html",
    "parse_markdown",
    "render_html",
    "split_bold",
]
