"""Unit tests for shared parsing helpers."""

from __future__ import annotations

import pytest

from podtranslate.parsing import normalize_optional_string, parse_word_hints


def test_normalize_optional_string_trims_and_blanks_to_none() -> None:
    """Whitespace-only values normalize to `None`."""

    assert normalize_optional_string("  llama3.1 ") == "llama3.1"
    assert normalize_optional_string("   ") is None
    assert normalize_optional_string(None) is None
    assert normalize_optional_string(42) == "42"


def test_parse_word_hints_accepts_comma_string_and_sequences() -> None:
    """Both comma strings and YAML lists produce ordered, trimmed hints."""

    assert parse_word_hints("Java, , JDK") == ("Java", "JDK")
    assert parse_word_hints(["Java", " GraalVM "]) == ("Java", "GraalVM")
    assert parse_word_hints(None) == ()


def test_parse_word_hints_rejects_scalars() -> None:
    """Non-string scalars are not valid hint lists."""

    with pytest.raises(ValueError):
        parse_word_hints(3)
