"""Transcript cleanup through the local Ollama service.

Raw speech-to-text output lacks punctuation and carries recognition slips;
the enhancer asks the model to repair grammar and punctuation without changing
meaning before the text is translated.
"""

from __future__ import annotations

from typing import Protocol

from .ollama_client import OllamaClient
from .prompts import PromptLibrary


class Enhancer(Protocol):
    """Protocol for transcript cleanup implementations."""

    def enhance(self, transcript_text: str) -> str:
        """Return a cleaned-up version of `transcript_text`."""


class TranscriptEnhancer:
    """Ollama-backed transcript cleanup."""

    def __init__(
        self,
        client: OllamaClient,
        model: str,
        prompts: PromptLibrary | None = None,
    ) -> None:
        self.client = client
        self.model = model
        self.prompts = prompts if prompts is not None else PromptLibrary()

    def enhance(self, transcript_text: str) -> str:
        """Clean up transcript grammar and punctuation with one generate call."""

        return self.client.generate(
            model=self.model,
            prompt=self.prompts.enhance_prompt(transcript_text),
            stage="enhance",
        )
