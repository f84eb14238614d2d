"""Audio merging and conversion helpers used by synthesis backends."""

from .merger import AudioMerger
from .transcode import AudioTranscoder

__all__ = ["AudioMerger", "AudioTranscoder"]
