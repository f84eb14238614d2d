"""Ollama HTTP client utilities for the enhance and translate stages.

Responsibilities:
- Probe the local Ollama service before a job commits to any work.
- Send non-streaming generate requests and extract the response text.
- Raise stage-aware errors for pipeline-level diagnostics.
"""

from __future__ import annotations

import json
from typing import Any

import requests

from ..errors import ErrorKind, PipelineStageError


DEFAULT_OLLAMA_URL = "http://localhost:11434"


class OllamaClient:
    """Minimal requests-based client for a local Ollama service."""

    _MAX_SERVICE_MESSAGE_CHARS = 180

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_OLLAMA_URL,
        liveness_timeout_seconds: float = 1.0,
        request_timeout_seconds: float | None = None,
    ) -> None:
        """Initialize Ollama HTTP client settings."""

        self.base_url = base_url.rstrip("/")
        self.liveness_timeout_seconds = liveness_timeout_seconds
        self.request_timeout_seconds = request_timeout_seconds

    def is_alive(self) -> bool:
        """Return whether `GET /api/version` answers HTTP 200 within the liveness timeout."""

        try:
            response = requests.get(
                f"{self.base_url}/api/version",
                timeout=self.liveness_timeout_seconds,
            )
        except requests.RequestException:
            return False
        return response.status_code == 200

    def generate(self, *, model: str, prompt: str, stage: str) -> str:
        """Run one non-streaming generation and return the `response` text.

        Raises:
            PipelineStageError: `service_unavailable` on transport failure or a
                non-200 status, `parse` when the body lacks a `response` string.
        """

        endpoint = f"{self.base_url}/api/generate"
        payload = {"model": model, "prompt": prompt, "stream": False}
        try:
            response = requests.post(
                endpoint,
                json=payload,
                timeout=self.request_timeout_seconds,
            )
        except requests.RequestException as exc:
            raise PipelineStageError(
                stage=stage,
                kind=ErrorKind.SERVICE_UNAVAILABLE,
                detail=(
                    f"Ollama request to `{endpoint}` failed: "
                    f"{self._short_message(str(exc))}"
                ),
                hint="Make sure `ollama serve` is running and reachable.",
            ) from exc

        if response.status_code != 200:
            service_message = self._extract_service_message(response)
            detail = f"Ollama request failed (HTTP {response.status_code})"
            raise PipelineStageError(
                stage=stage,
                kind=ErrorKind.SERVICE_UNAVAILABLE,
                detail=f"{detail}: {service_message}" if service_message else f"{detail}.",
                hint=f"Check that model `{model}` is pulled (`ollama pull {model}`).",
            )

        return self._extract_response_text(response, stage)

    def _extract_response_text(self, response: requests.Response, stage: str) -> str:
        """Extract the generated text from an Ollama generate response body."""

        try:
            payload: Any = response.json()
        except ValueError as exc:
            raise PipelineStageError(
                stage=stage,
                kind=ErrorKind.PARSE,
                detail="Ollama returned a response body that is not valid JSON.",
            ) from exc

        text = payload.get("response") if isinstance(payload, dict) else None
        if not isinstance(text, str):
            raise PipelineStageError(
                stage=stage,
                kind=ErrorKind.PARSE,
                detail="Ollama response is missing the `response` text field.",
            )
        return text.strip()

    @classmethod
    def _extract_service_message(cls, response: requests.Response) -> str:
        """Extract a concise error message from a failed Ollama response."""

        body = response.text.strip() if response.text else ""
        if not body:
            return ""
        try:
            payload = json.loads(body)
        except json.JSONDecodeError:
            return cls._short_message(body)
        if isinstance(payload, dict) and isinstance(payload.get("error"), str):
            return cls._short_message(payload["error"])
        return cls._short_message(body)

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing service message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_SERVICE_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_SERVICE_MESSAGE_CHARS - 1]}..."
