"""Unit tests for speech synthesis backends."""

from __future__ import annotations

from pathlib import Path
import sys
import types
import wave

import pytest
from pytest import MonkeyPatch

from podtranslate.errors import ErrorKind, PipelineStageError
from podtranslate.io.artifacts import ArtifactManager
from podtranslate.tts.backends import (
    EspeakBackend,
    MacSayBackend,
    Pico2WaveBackend,
    Pyttsx3Backend,
    build_default_backends,
)
from tests.fakes import FakeInvoker, StaticProber, failed, ffmpeg_handler, flag_writer_handler


def _frame_count(path: Path) -> int:
    with wave.open(str(path), "rb") as wav_file:
        return wav_file.getnframes()


def test_default_backends_follow_fixed_preference_order(tmp_path: Path) -> None:
    """Backends are always tried as espeak, pico2wave, say, pyttsx3."""

    backends = build_default_backends(FakeInvoker(), ArtifactManager(tmp_path, "job"))

    assert [backend.name for backend in backends] == ["espeak", "pico2wave", "say", "pyttsx3"]
    assert [backend.platform_family for backend in backends] == [None, None, "macos", None]


def test_espeak_reads_text_from_scratch_file(tmp_path: Path) -> None:
    """espeak gets the voice, a text file and the WAV target; the file is removed after."""

    work_dir = tmp_path / "work"
    seen: dict[str, str] = {}

    def _espeak(arguments: tuple[str, ...]) -> object:
        text_file = Path(arguments[arguments.index("-f") + 1])
        seen["text"] = text_file.read_text(encoding="utf-8")
        return flag_writer_handler("espeak", "-w")(arguments)

    invoker = FakeInvoker({"espeak": _espeak})
    output = tmp_path / "out.wav"

    outcome = EspeakBackend(invoker, ArtifactManager(work_dir, "job")).synthesize(
        "Bonjour tout le monde.", "fr", output
    )

    _, arguments = invoker.calls[0]
    assert arguments[:2] == ("-v", "fr")
    assert arguments[arguments.index("-w") + 1] == str(output)
    assert seen["text"] == "Bonjour tout le monde."
    assert outcome.backend == "espeak"
    assert output.is_file()
    assert list(work_dir.iterdir()) == []


def test_espeak_transcodes_when_output_is_not_wav(tmp_path: Path) -> None:
    """Non-WAV outputs are rendered to a scratch WAV and converted with ffmpeg."""

    invoker = FakeInvoker(
        {"espeak": flag_writer_handler("espeak", "-w"), "ffmpeg": ffmpeg_handler}
    )
    output = tmp_path / "out.mp3"

    EspeakBackend(invoker, ArtifactManager(tmp_path / "work", "job")).synthesize(
        "Hola.", "es", output
    )

    assert invoker.commands() == ["espeak", "ffmpeg"]
    _, ffmpeg_arguments = invoker.calls[1]
    assert ffmpeg_arguments[-1] == str(output)
    assert output.exists()
    assert list((tmp_path / "work").iterdir()) == []


def test_pico2wave_chunks_long_text_and_merges_in_order(tmp_path: Path) -> None:
    """Each chunk is rendered separately and merged into one WAV."""

    invoker = FakeInvoker({"pico2wave": flag_writer_handler("pico2wave", "-w")})
    output = tmp_path / "out.wav"
    text = "First sentence here. Second sentence here. Third sentence here."

    outcome = Pico2WaveBackend(
        invoker, ArtifactManager(tmp_path / "work", "job"), max_chunk_chars=25
    ).synthesize(text, "de", output)

    spoken = [arguments[-1] for _, arguments in invoker.calls]
    assert "".join(spoken) == text
    assert all(len(chunk) <= 25 for chunk in spoken)
    assert all(arguments[:2] == ("-l", "de-DE") for _, arguments in invoker.calls)
    assert outcome.chunk_count == len(spoken) == 3
    assert _frame_count(output) == 3 * 1600
    assert list((tmp_path / "work").iterdir()) == []


def test_pico2wave_failure_removes_rendered_chunks(tmp_path: Path) -> None:
    """A failing chunk stops synthesis and leaves no chunk files behind."""

    work_dir = tmp_path / "work"
    writer = flag_writer_handler("pico2wave", "-w")
    calls = {"count": 0}

    def _second_chunk_fails(arguments: tuple[str, ...]) -> object:
        calls["count"] += 1
        if calls["count"] == 2:
            return failed("pico2wave", arguments, output="Unknown language")
        return writer(arguments)

    invoker = FakeInvoker({"pico2wave": _second_chunk_fails})
    output = tmp_path / "out.wav"

    with pytest.raises(PipelineStageError) as exc_info:
        Pico2WaveBackend(invoker, ArtifactManager(work_dir, "job"), max_chunk_chars=10).synthesize(
            "One. Two. Three. Four.", "en", output
        )

    assert exc_info.value.kind is ErrorKind.NON_ZERO_EXIT
    assert exc_info.value.stage == "synthesize"
    assert list(work_dir.iterdir()) == []


def test_pico2wave_rejects_blank_text(tmp_path: Path) -> None:
    """Whitespace-only text has nothing to speak."""

    invoker = FakeInvoker({"pico2wave": flag_writer_handler("pico2wave", "-w")})

    with pytest.raises(PipelineStageError) as exc_info:
        Pico2WaveBackend(invoker, ArtifactManager(tmp_path / "work", "job")).synthesize(
            "   ", "en", tmp_path / "out.wav"
        )

    assert exc_info.value.kind is ErrorKind.SYNTHESIS
    assert invoker.calls == []


def test_mac_say_renders_aiff_and_converts_to_wav(tmp_path: Path) -> None:
    """`say` writes AIFF, which is converted to the requested WAV output."""

    invoker = FakeInvoker({"say": flag_writer_handler("say", "-o"), "ffmpeg": ffmpeg_handler})
    output = tmp_path / "out.wav"

    MacSayBackend(invoker, ArtifactManager(tmp_path / "work", "job")).synthesize(
        "Guten Tag.", "de", output
    )

    _, say_arguments = invoker.calls[0]
    assert say_arguments[:2] == ("-v", "Anna")
    assert say_arguments[3].endswith(".aiff")
    assert invoker.commands() == ["say", "ffmpeg"]
    assert output.exists()


def test_pyttsx3_probe_uses_module_lookup(tmp_path: Path) -> None:
    """pyttsx3 is available when its module can be imported."""

    backend = Pyttsx3Backend(FakeInvoker(), ArtifactManager(tmp_path, "job"))

    assert backend.probe(StaticProber(available={"pyttsx3": True})) is True
    assert backend.probe(StaticProber()) is False


def test_pyttsx3_picks_voice_by_language_and_saves_file(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """The first voice whose id or name mentions the language is used."""

    recorded: dict[str, object] = {}

    class _Engine:
        def getProperty(self, name: str) -> object:
            return [
                types.SimpleNamespace(id="com.voice.en-US", name="English"),
                types.SimpleNamespace(id="com.voice.fr-FR", name="French"),
            ]

        def setProperty(self, name: str, value: object) -> None:
            recorded[name] = value

        def save_to_file(self, text: str, path: str) -> None:
            recorded["text"] = text
            Path(path).write_bytes(b"RIFF")

        def runAndWait(self) -> None:
            recorded["ran"] = True

    fake_module = types.SimpleNamespace(init=lambda: _Engine())
    monkeypatch.setitem(sys.modules, "pyttsx3", fake_module)
    output = tmp_path / "out.wav"

    outcome = Pyttsx3Backend(FakeInvoker(), ArtifactManager(tmp_path / "work", "job")).synthesize(
        "Salut.", "fr", output
    )

    assert recorded["voice"] == "com.voice.fr-FR"
    assert recorded["text"] == "Salut."
    assert recorded["ran"] is True
    assert outcome.backend == "pyttsx3"
    assert output.exists()


def test_pyttsx3_without_output_file_is_synthesis_error(
    monkeypatch: MonkeyPatch, tmp_path: Path
) -> None:
    """A driver that silently writes nothing is reported as a synthesis failure."""

    class _SilentEngine:
        def getProperty(self, name: str) -> object:
            return []

        def setProperty(self, name: str, value: object) -> None:
            return None

        def save_to_file(self, text: str, path: str) -> None:
            return None

        def runAndWait(self) -> None:
            return None

    monkeypatch.setitem(sys.modules, "pyttsx3", types.SimpleNamespace(init=_SilentEngine))

    with pytest.raises(PipelineStageError) as exc_info:
        Pyttsx3Backend(FakeInvoker(), ArtifactManager(tmp_path / "work", "job")).synthesize(
            "Hi.", "en", tmp_path / "out.wav"
        )

    assert exc_info.value.kind is ErrorKind.SYNTHESIS
