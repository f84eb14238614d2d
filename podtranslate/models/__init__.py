"""Typed records exchanged between pipeline stages."""

from .datatypes import (
    PipelineJob,
    RunSummary,
    SynthesisOutcome,
    TextChunk,
    TranscriptDocument,
    TranscriptSegment,
)

__all__ = [
    "PipelineJob",
    "TranscriptSegment",
    "TranscriptDocument",
    "TextChunk",
    "SynthesisOutcome",
    "RunSummary",
]
