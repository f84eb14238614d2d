"""Speech-to-text adapters."""

from .whisper import WhisperTranscriber

__all__ = ["WhisperTranscriber"]
