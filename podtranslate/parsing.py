"""Shared parsing helpers for config and CLI value normalization."""

from __future__ import annotations

from collections.abc import Iterable


def normalize_optional_string(value: object) -> str | None:
    """Normalize an optional value to a stripped non-empty string.

    Args:
        value: Arbitrary input value.

    Returns:
        Stripped string value, or `None` when the value is empty after trimming.
    """

    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    return text


def parse_word_hints(value: object) -> tuple[str, ...]:
    """Parse proper-noun hints from a comma list or a sequence of strings.

    Blank entries are dropped and the original order is kept, so
    `"Java, , JDK"` and `["Java", "JDK"]` both yield `("Java", "JDK")`.
    """

    if value is None:
        return tuple()
    if isinstance(value, str):
        raw_items: Iterable[object] = value.split(",")
    elif isinstance(value, Iterable):
        raw_items = value
    else:
        raise ValueError("Word hints must be a comma-separated string or a list of strings.")

    hints: list[str] = []
    for item in raw_items:
        normalized = normalize_optional_string(item)
        if normalized is not None:
            hints.append(normalized)
    return tuple(hints)
