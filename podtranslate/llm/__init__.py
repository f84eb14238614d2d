"""LLM-facing abstractions for transcript cleanup and translation."""

from .enhancer import Enhancer, TranscriptEnhancer
from .ollama_client import DEFAULT_OLLAMA_URL, OllamaClient
from .prompts import PromptLibrary, language_name
from .translator import OllamaTranslator, Translator

__all__ = [
    "DEFAULT_OLLAMA_URL",
    "OllamaClient",
    "PromptLibrary",
    "language_name",
    "Enhancer",
    "TranscriptEnhancer",
    "Translator",
    "OllamaTranslator",
]
