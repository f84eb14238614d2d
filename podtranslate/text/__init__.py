"""Text segmentation building blocks used before synthesis."""

from .chunking import TextChunker, TextChunks

__all__ = ["TextChunker", "TextChunks"]
