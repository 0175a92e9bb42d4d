from __future__ import annotations

from typing import Any, Dict

import httpx
import pytest

from travelsynth.core import llm


class DummyResponse:
    def __init__(self, payload: Dict[str, Any]):
        self.payload = payload

    def raise_for_status(self) -> None:
        return None

    def json(self) -> Dict[str, Any]:
        return self.payload


def test_generate_posts_grounded_request(monkeypatch: pytest.MonkeyPatch) -> None:
    captured: Dict[str, Any] = {}

    def fake_post(url: str, **kwargs: Any) -> DummyResponse:
        captured["url"] = url
        captured.update(kwargs)
        return DummyResponse({"candidates": []})

    monkeypatch.setattr(llm.httpx, "post", fake_post)
    client = llm.LLMClient(api_key="secret", base_url="https://gemini.test/v1beta/", timeout=30)

    result = client.generate(
        prompt="Plan Lisbon",
        system="You are a travel writer",
        model="gemini-test",
        temperature=0.4,
        search_grounding=True,
    )

    assert result == {"candidates": []}
    assert captured["url"] == "https://gemini.test/v1beta/models/gemini-test:generateContent"
    assert captured["headers"]["x-goog-api-key"] == "secret"
    assert captured["timeout"] == 30
    assert captured["json"] == {
        "contents": [{"role": "user", "parts": [{"text": "Plan Lisbon"}]}],
        "systemInstruction": {"parts": [{"text": "You are a travel writer"}]},
        "tools": [{"google_search": {}}],
        "generationConfig": {"temperature": 0.4},
    }


def test_payload_omits_unused_fields() -> None:
    payload = llm.LLMClient(api_key="secret").build_payload(prompt="hi", system=None)

    assert payload == {"contents": [{"role": "user", "parts": [{"text": "hi"}]}]}


def test_generate_requires_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        llm.httpx, "post", lambda *args, **kwargs: pytest.fail("API should not be called")
    )

    with pytest.raises(RuntimeError, match="GEMINI_API_KEY"):
        llm.LLMClient(api_key=None).generate(prompt="hi")


def test_generate_raises_on_http_error(monkeypatch: pytest.MonkeyPatch) -> None:
    def fake_post(url: str, **kwargs: Any) -> httpx.Response:
        return httpx.Response(401, request=httpx.Request("POST", url))

    monkeypatch.setattr(llm.httpx, "post", fake_post)

    with pytest.raises(httpx.HTTPStatusError):
        llm.LLMClient(api_key="bad").generate(prompt="hi")


def test_extract_text_joins_parts() -> None:
    response = {
        "candidates": [
            {"content": {"parts": [{"text": "# Guide\n"}, {"functionCall": {}}, {"text": "Body"}]}}
        ]
    }

    assert llm.LLMClient.extract_text(response) == "# Guide\nBody"


@pytest.mark.parametrize(
    "response",
    [{}, {"candidates": []}, {"candidates": [{}]}, {"candidates": [{"content": {"parts": None}}]}],
)
def test_extract_text_returns_empty_for_missing_content(response: Dict[str, Any]) -> None:
    assert llm.LLMClient.extract_text(response) == ""


def test_extract_grounding_chunks() -> None:
    chunks = [{"web": {"uri": "https://a.example", "title": "A"}}, "junk"]
    response = {"candidates": [{"groundingMetadata": {"groundingChunks": chunks}}]}

    assert llm.LLMClient.extract_grounding_chunks(response) == [chunks[0]]
    assert llm.LLMClient.extract_grounding_chunks({"candidates": [{}]}) == []


def test_client_reads_environment_when_built(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GEMINI_API_KEY", "from-dotenv")
    monkeypatch.setenv("GEMINI_MODEL", "gemini-env")
    monkeypatch.setenv("GEMINI_BASE_URL", "https://proxy.test/v1beta")
    monkeypatch.setenv("LLM_TIMEOUT", "45")

    client = llm.LLMClient()

    assert client.api_key == "from-dotenv"
    assert client.model == "gemini-env"
    assert client.base_url == "https://proxy.test/v1beta"
    assert client.timeout == 45.0


def test_client_falls_back_to_api_key_and_defaults(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("GEMINI_API_KEY", "GEMINI_MODEL", "GEMINI_BASE_URL", "LLM_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("API_KEY", "legacy")

    client = llm.LLMClient()

    assert client.api_key == "legacy"
    assert client.model == llm.FALLBACK_MODEL
    assert client.base_url == llm.FALLBACK_BASE_URL
    assert client.timeout == 120.0
