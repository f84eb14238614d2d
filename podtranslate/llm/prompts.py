"""Prompt template library for transcription and LLM stages.

Responsibilities:
- Centralize prompt construction for transcription, enhancement, and translation.
- Map language codes to the language names used inside prompts.
"""

from __future__ import annotations

from collections.abc import Sequence


DEFAULT_TRANSCRIPTION_CONTEXT = (
    "This is a tech podcast about Java and software development. "
    "The podcast is called Foojay Podcast."
)

_LANGUAGE_NAMES = {
    "en": "English",
    "fr": "French",
    "es": "Spanish",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "zh": "Chinese",
    "ja": "Japanese",
}


def language_name(language_code: str) -> str:
    """Return the English name for a language code, or the code itself."""

    return _LANGUAGE_NAMES.get(language_code.strip().lower(), language_code)


class PromptLibrary:
    """Build prompt strings for supported tasks."""

    def __init__(self, transcription_context: str = DEFAULT_TRANSCRIPTION_CONTEXT) -> None:
        self.transcription_context = transcription_context

    def transcription_prompt(self, word_hints: Sequence[str], episode_context: str = "") -> str:
        """Return the initial prompt that primes the transcription engine."""

        parts = [self.transcription_context.strip()]
        if word_hints:
            parts.append(
                "It frequently mentions people and technologies including: "
                f"{', '.join(word_hints)}."
            )
        if episode_context.strip():
            parts.append(episode_context.strip())
        return " ".join(part for part in parts if part)

    def enhance_prompt(self, transcript_text: str) -> str:
        """Return the cleanup prompt for a raw transcript."""

        return (
            "You are an expert in enhancing and cleaning up transcribed text. "
            "Fix any grammatical errors, improve punctuation, and make the text more "
            "readable while preserving the original meaning. "
            "Output only the improved text.\n\n"
            f"Here is the original text:\n\n{transcript_text}"
        )

    def translate_prompt(self, text: str, source_language: str, target_language: str) -> str:
        """Return the translation prompt between two language codes."""

        source_name = language_name(source_language)
        target_name = language_name(target_language)
        return (
            f"Translate the following {source_name} text to {target_name}. "
            "Ensure the translation is natural and preserves the original meaning. "
            "Output only the translation.\n\n"
            f"Text to translate:\n{text}\n\n"
            f"Translation in {target_name}:"
        )
