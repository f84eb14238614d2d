"""Text-to-speech backends and backend selection."""

from .backends import (
    EspeakBackend,
    MacSayBackend,
    Pico2WaveBackend,
    Pyttsx3Backend,
    SynthesisBackend,
    build_default_backends,
)
from .selector import BackendAvailability, EngineSelector
from .voices import VoiceProfile

__all__ = [
    "SynthesisBackend",
    "EspeakBackend",
    "Pico2WaveBackend",
    "MacSayBackend",
    "Pyttsx3Backend",
    "build_default_backends",
    "EngineSelector",
    "BackendAvailability",
    "VoiceProfile",
]
