"""Shared utilities for TravelSynth's LLM-backed agents."""

from __future__ import annotations

from typing import Iterable, List


class UrlValidationError(ValueError):
    """Raised when a request carries no usable source URL."""


class GuideGenerationError(RuntimeError):
    """Raised when the generation service cannot produce a guide."""


def filter_urls(urls: Iterable[str]) -> List[str]:
    """Drop blank URL slots, keeping the order of the remaining entries."""

    return [url.strip() for url in urls if url and url.strip()]


from .guide import GuideComposer, extract_sources

__all__ = [
    "GuideComposer",
    "GuideGenerationError",
    "UrlValidationError",
    "extract_sources",
    "filter_urls",
]
