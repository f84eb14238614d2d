"""Integration-test fixtures that keep runs away from real services."""

from __future__ import annotations

import pytest
import requests

from podtranslate.llm import ollama_client


@pytest.fixture(autouse=True)
def _block_ollama_network(monkeypatch: pytest.MonkeyPatch) -> None:
    """Fail loudly if an integration test reaches for the real Ollama service."""

    def _refuse(*args: object, **kwargs: object) -> None:
        raise requests.ConnectionError("network access disabled in integration tests")

    monkeypatch.setattr(ollama_client.requests, "get", _refuse)
    monkeypatch.setattr(ollama_client.requests, "post", _refuse)
