"""Sentence-aware text chunking for length-limited synthesis engines.

Responsibilities:
- Split translated text into bounded chunks, preferring sentence ends.
- Guarantee forward progress and exact reassembly of the source text.
"""

from __future__ import annotations

from collections.abc import Iterator

from ..models.datatypes import TextChunk


class TextChunks:
    """Lazy, restartable sequence of chunks for one text and bound."""

    def __init__(self, chunker: TextChunker, text: str, max_length: int) -> None:
        self._chunker = chunker
        self.text = text
        self.max_length = max_length

    def __iter__(self) -> Iterator[TextChunk]:
        return self._chunker.iter_chunks(self.text, self.max_length)

    def texts(self) -> list[str]:
        """Return chunk texts in order."""

        return [chunk.text for chunk in self]


class TextChunker:
    """Create bounded chunks that end after `.`, `!` or `?` where possible."""

    _SENTENCE_TERMINATORS = frozenset(".!?")

    def chunk(self, text: str, max_length: int) -> TextChunks:
        """Return a lazy chunk sequence for `text` bounded by `max_length` characters.

        Raises:
            ValueError: If `max_length` is not a positive integer.
        """

        if max_length <= 0:
            raise ValueError("`max_length` must be a positive integer.")
        return TextChunks(self, text, max_length)

    def iter_chunks(self, text: str, max_length: int) -> Iterator[TextChunk]:
        """Yield chunks from the start of `text`; every call starts over."""

        if max_length <= 0:
            raise ValueError("`max_length` must be a positive integer.")

        start = 0
        index = 0
        text_length = len(text)
        while start < text_length:
            end, boundary = self._resolve_boundary(text, start, max_length)
            yield TextChunk(
                index=index,
                text=text[start:end],
                char_start=start,
                char_end=end,
                boundary=boundary,
            )
            index += 1
            start = end

    def _resolve_boundary(self, text: str, start: int, max_length: int) -> tuple[int, str]:
        """Resolve chunk end index and boundary marker."""

        natural_end = start + max_length
        if natural_end >= len(text):
            return len(text), "end"

        sentence_end = self._find_last_sentence_end(text, start, natural_end)
        if sentence_end is None:
            return natural_end, "forced"
        return self._consume_trailing_whitespace(text, sentence_end, natural_end), "sentence"

    def _find_last_sentence_end(self, text: str, start: int, natural_end: int) -> int | None:
        """Return the index just after the last terminator strictly before `natural_end`."""

        index = natural_end - 1
        while index >= start:
            if text[index] in self._SENTENCE_TERMINATORS:
                return index + 1
            index -= 1
        return None

    def _consume_trailing_whitespace(self, text: str, index: int, limit: int) -> int:
        """Extend a sentence boundary over following whitespace, never past `limit`."""

        adjusted = index
        while adjusted < limit and text[adjusted].isspace():
            adjusted += 1
        return adjusted
