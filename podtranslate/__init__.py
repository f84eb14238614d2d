"""Top-level package for podtranslate.

This package turns a spoken-word audio or video file into speech in another
language using locally installed tools: ffmpeg, whisper.cpp, Ollama, and a
local speech synthesizer. The main orchestration entry point is
`MediaTranslationPipeline`.
"""

from .pipeline import MediaTranslationPipeline

__all__ = ["MediaTranslationPipeline", "__version__"]

__version__ = "0.1.0"
