"""Voice selection per synthesis backend.

Responsibilities:
- Map ISO language codes to backend-native voice or language identifiers.
- Decouple backend invocation from backend-specific naming.
"""

from __future__ import annotations

from dataclasses import dataclass


_ESPEAK_VOICES = {
    "en": "en",
    "fr": "fr",
    "es": "es",
    "de": "de",
    "it": "it",
    "pt": "pt",
    "ru": "ru",
    "zh": "zh",
    "ja": "ja",
}
_PICO_LANGUAGES = {
    "en": "en-US",
    "fr": "fr-FR",
    "es": "es-ES",
    "de": "de-DE",
    "it": "it-IT",
}
_PICO_FALLBACK = "en-US"
_MAC_VOICES = {
    "en": "Alex",
    "fr": "Thomas",
    "es": "Juan",
    "de": "Anna",
    "it": "Alice",
    "ja": "Kyoko",
    "zh": "Tingting",
}
_MAC_FALLBACK = "Alex"


@dataclass(frozen=True, slots=True)
class VoiceProfile:
    """Backend-native voice chosen for one target language.

    Attributes:
        backend: Synthesis backend name.
        language: ISO language code requested by the job.
        voice_id: Identifier passed to the backend.
    """

    backend: str
    language: str
    voice_id: str


def espeak_voice(language: str) -> VoiceProfile:
    """Return the espeak voice; unknown codes are passed through unchanged."""

    code = language.strip().lower()
    return VoiceProfile("espeak", code, _ESPEAK_VOICES.get(code, code))


def pico_voice(language: str) -> VoiceProfile:
    """Return the pico2wave language, falling back to American English."""

    code = language.strip().lower()
    return VoiceProfile("pico2wave", code, _PICO_LANGUAGES.get(code, _PICO_FALLBACK))


def mac_voice(language: str) -> VoiceProfile:
    """Return the macOS `say` voice name, falling back to `Alex`."""

    code = language.strip().lower()
    return VoiceProfile("say", code, _MAC_VOICES.get(code, _MAC_FALLBACK))
