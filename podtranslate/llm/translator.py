"""Translation through the local Ollama service."""

from __future__ import annotations

from typing import Protocol

from .ollama_client import OllamaClient
from .prompts import PromptLibrary


class Translator(Protocol):
    """Protocol for translation providers."""

    def translate(self, text: str, source_language: str, target_language: str) -> str:
        """Translate `text` between two language codes."""


class OllamaTranslator:
    """Ollama-backed translator for whole-transcript translation."""

    def __init__(
        self,
        client: OllamaClient,
        model: str,
        prompts: PromptLibrary | None = None,
    ) -> None:
        self.client = client
        self.model = model
        self.prompts = prompts if prompts is not None else PromptLibrary()

    def translate(self, text: str, source_language: str, target_language: str) -> str:
        """Translate `text` with one synchronous generate call."""

        return self.client.generate(
            model=self.model,
            prompt=self.prompts.translate_prompt(text, source_language, target_language),
            stage="translate",
        )
