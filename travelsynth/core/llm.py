"""Centralised client for the Gemini generation API."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, MutableMapping, Optional

import httpx


FALLBACK_MODEL = "gemini-3-flash-preview"
FALLBACK_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
FALLBACK_TIMEOUT = "120"


_LOGGER = logging.getLogger(__name__)


def default_model() -> str:
    """Return the configured model id, read when a client is built."""

    return os.getenv("GEMINI_MODEL") or FALLBACK_MODEL


def _env_timeout() -> Optional[float]:
    raw = os.getenv("LLM_TIMEOUT", FALLBACK_TIMEOUT)
    return float(raw) if raw else None


def _clean_dict(payload: MutableMapping[str, Any]) -> Dict[str, Any]:
    return {key: value for key, value in payload.items() if value is not None}


def _first_candidate(response: Mapping[str, Any]) -> Mapping[str, Any]:
    candidates = response.get("candidates")
    if not candidates or not isinstance(candidates, list):
        return {}
    first = candidates[0]
    return first if isinstance(first, Mapping) else {}


@dataclass
class LLMClient:
    """A small convenience wrapper for calling the Gemini ``generateContent`` API."""

    model: str = field(default_factory=default_model)
    timeout: Optional[float] = field(default_factory=_env_timeout)
    api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("API_KEY")
    )
    base_url: str = field(
        default_factory=lambda: os.getenv("GEMINI_BASE_URL", FALLBACK_BASE_URL)
    )

    def build_payload(
        self,
        *,
        prompt: str,
        system: Optional[str],
        temperature: Optional[float] = None,
        search_grounding: bool = False,
    ) -> Dict[str, Any]:
        """Return the JSON body for a ``generateContent`` request."""

        generation_config = _clean_dict({"temperature": temperature})
        payload: Dict[str, Any] = {
            "contents": [{"role": "user", "parts": [{"text": prompt}]}],
            "systemInstruction": {"parts": [{"text": system}]} if system else None,
            "tools": [{"google_search": {}}] if search_grounding else None,
            "generationConfig": generation_config or None,
        }
        return _clean_dict(payload)

    def generate(
        self,
        *,
        prompt: str,
        system: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        search_grounding: bool = False,
        timeout: Optional[float] = None,
    ) -> Dict[str, Any]:
        """Call the backing generation API and return its raw JSON response."""

        if not self.api_key:
            raise RuntimeError("GEMINI_API_KEY environment variable is not set")

        model_name = model or self.model
        payload = self.build_payload(
            prompt=prompt,
            system=system,
            temperature=temperature,
            search_grounding=search_grounding,
        )

        _LOGGER.debug(
            "Calling generateContent on model %s [search_grounding=%s]",
            model_name,
            search_grounding,
        )

        headers = {"Content-Type": "application/json", "x-goog-api-key": self.api_key}

        request_kwargs: Dict[str, Any] = {}
        request_timeout = timeout if timeout is not None else self.timeout
        if request_timeout is not None:
            request_kwargs["timeout"] = request_timeout

        response = httpx.post(
            f"{self.base_url.rstrip('/')}/models/{model_name}:generateContent",
            json=payload,
            headers=headers,
            **request_kwargs,
        )
        response.raise_for_status()
        return response.json()

    @staticmethod
    def extract_text(response: Mapping[str, Any]) -> str:
        """Concatenate the text parts of the first candidate, or return ``""``."""

        content = _first_candidate(response).get("content") or {}
        parts = content.get("parts") if isinstance(content, Mapping) else None
        if not isinstance(parts, list):
            return ""
        texts = [
            part["text"]
            for part in parts
            if isinstance(part, Mapping) and isinstance(part.get("text"), str)
        ]
        return "".join(texts)

    @staticmethod
    def extract_grounding_chunks(response: Mapping[str, Any]) -> List[Mapping[str, Any]]:
        """Return the raw grounding chunks attached to the first candidate."""

        metadata = _first_candidate(response).get("groundingMetadata") or {}
        if not isinstance(metadata, Mapping):
            return []
        chunks = metadata.get("groundingChunks") or []
        if not isinstance(chunks, list):
            return []
        return [chunk for chunk in chunks if isinstance(chunk, Mapping)]


__all__ = ["LLMClient", "default_model"]
