"""Unit tests for synthesis backend selection."""

from __future__ import annotations

import pytest

from podtranslate.errors import ErrorKind, PipelineStageError
from podtranslate.tts.selector import EngineSelector
from tests.fakes import FakeBackend, StaticProber


def _backends() -> list[FakeBackend]:
    return [
        FakeBackend("espeak"),
        FakeBackend("pico2wave"),
        FakeBackend("say", platform_family="macos"),
        FakeBackend("pyttsx3"),
    ]


def test_selector_returns_first_available_and_stops_probing() -> None:
    """With A unavailable and B, C available, B is chosen and C is never probed."""

    prober = StaticProber(
        available={"espeak": False, "pico2wave": True, "say": True, "pyttsx3": False},
        platform_family="macos",
    )

    selected = EngineSelector(_backends(), prober).select()

    assert selected.name == "pico2wave"
    assert prober.probed == ["espeak", "pico2wave"]


def test_selector_skips_platform_restricted_backend_off_platform() -> None:
    """`say` is only considered on macOS, even if a binary with that name exists."""

    prober = StaticProber(available={"say": True, "pyttsx3": True}, platform_family="linux")

    selected = EngineSelector(_backends(), prober).select()

    assert selected.name == "pyttsx3"
    assert "say" not in prober.probed


def test_selector_fails_with_unavailable_naming_every_backend() -> None:
    """When nothing is usable the error lists every attempted backend."""

    with pytest.raises(PipelineStageError) as exc_info:
        EngineSelector(_backends(), StaticProber()).select()

    assert exc_info.value.kind is ErrorKind.UNAVAILABLE
    assert exc_info.value.stage == "synthesize"
    assert "espeak, pico2wave, say, pyttsx3" in exc_info.value.detail


def test_report_probes_every_backend_in_order() -> None:
    """Diagnostics list all backends with platform and availability flags."""

    prober = StaticProber(available={"pico2wave": True}, platform_family="linux")

    rows = EngineSelector(_backends(), prober).report()

    assert [(row.name, row.platform_ok, row.available) for row in rows] == [
        ("espeak", True, False),
        ("pico2wave", True, True),
        ("say", False, False),
        ("pyttsx3", True, False),
    ]
