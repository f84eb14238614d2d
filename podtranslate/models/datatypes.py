"""Core datatypes shared across podtranslate modules.

Responsibilities:
- Represent immutable records exchanged between pipeline stages.
- Provide explicit typing for stage inputs and outputs.

Key types:
- `PipelineJob`, `TranscriptSegment`, `TranscriptDocument`, `TextChunk`,
  `SynthesisOutcome`, and `RunSummary`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, slots=True)
class PipelineJob:
    """One media translation request.

    Attributes:
        input_media: Source audio or video file.
        source_language: Spoken language of the input (ISO 639-1 code).
        target_language: Language of the produced audio (ISO 639-1 code).
        model: Ollama model identifier used for enhance and translate.
        output_audio: Final audio file path.
        word_hints: Proper nouns passed to the transcription prompt.
        episode_context: Optional free-text context for the transcription prompt.
    """

    input_media: Path
    source_language: str
    target_language: str
    model: str
    output_audio: Path
    word_hints: tuple[str, ...] = field(default_factory=tuple)
    episode_context: str = ""


@dataclass(frozen=True, slots=True)
class TranscriptSegment:
    """A timed slice of recognized speech.

    Attributes:
        start_ms: Segment start offset in milliseconds.
        end_ms: Segment end offset in milliseconds.
        text: Recognized text for the slice.
    """

    start_ms: int | None
    end_ms: int | None
    text: str


@dataclass(frozen=True, slots=True)
class TranscriptDocument:
    """Recognized text produced by the transcription engine."""

    text: str
    segments: tuple[TranscriptSegment, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class TextChunk:
    """A bounded text segment for length-limited synthesis engines.

    Attributes:
        index: 0-based position in the chunk sequence.
        text: Chunk text content.
        char_start: Inclusive character offset in the source text.
        char_end: Exclusive character offset in the source text.
        boundary: `sentence` (cut after a terminator), `forced` (greedy window
            without terminator), or `end` (reached end of text).
    """

    index: int
    text: str
    char_start: int
    char_end: int
    boundary: str = "sentence"


@dataclass(frozen=True, slots=True)
class SynthesisOutcome:
    """Result of one backend synthesis call."""

    backend: str
    output_path: Path
    chunk_count: int = 1


@dataclass(frozen=True, slots=True)
class RunSummary:
    """Outcome of one completed pipeline run."""

    job: PipelineJob
    output_audio: Path
    backend: str
    transcript_chars: int
    translation_chars: int
    chunk_count: int
