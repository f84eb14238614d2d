"""Speech synthesis backends.

Responsibilities:
- Define the capability interface shared by every synthesis backend.
- Drive espeak, pico2wave, and macOS `say` through the process invoker.
- Drive pyttsx3 in-process.
- Keep every scratch file (text input, chunk WAVs, native-format renders)
  inside a stage scope so it is deleted whatever the outcome.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Protocol

from loguru import logger

from ..audio.merger import AudioMerger
from ..audio.transcode import AudioTranscoder
from ..errors import ErrorKind, PipelineStageError
from ..io.artifacts import ArtifactManager, TempArtifactScope
from ..models.datatypes import SynthesisOutcome
from ..process import ProcessInvoker
from ..runtime_tools import AvailabilityProber
from ..text.chunking import TextChunker
from .voices import espeak_voice, mac_voice, pico_voice

_STAGE = "synthesize"
PICO_MAX_CHUNK_CHARS = 500


class SynthesisBackend(Protocol):
    """Capability interface for speech synthesis backends."""

    name: str
    platform_family: str | None

    def probe(self, prober: AvailabilityProber) -> bool:
        """Return whether the backend can run on this machine."""

    def synthesize(self, text: str, language: str, output_path: Path) -> SynthesisOutcome:
        """Render `text` spoken in `language` to `output_path`."""


class EspeakBackend:
    """espeak reading the text from a scratch file."""

    name = "espeak"
    platform_family: str | None = None

    def __init__(
        self,
        invoker: ProcessInvoker,
        artifacts: ArtifactManager,
        transcoder: AudioTranscoder | None = None,
    ) -> None:
        self.invoker = invoker
        self.artifacts = artifacts
        self.transcoder = transcoder if transcoder is not None else AudioTranscoder(invoker)

    def probe(self, prober: AvailabilityProber) -> bool:
        return prober.is_available(self.name)

    def synthesize(self, text: str, language: str, output_path: Path) -> SynthesisOutcome:
        voice = espeak_voice(language)

        def render(target: Path, scope: TempArtifactScope) -> int:
            text_path = scope.write_text("input.txt", text)
            _run_checked(
                self.invoker,
                self.name,
                ["-v", voice.voice_id, "-f", str(text_path), "-w", str(target)],
            )
            return 1

        return _render_native(
            backend=self.name,
            native_suffix=".wav",
            output_path=output_path,
            artifacts=self.artifacts,
            transcoder=self.transcoder,
            render=render,
        )


class Pico2WaveBackend:
    """pico2wave with chunked input, since it rejects long text."""

    name = "pico2wave"
    platform_family: str | None = None

    def __init__(
        self,
        invoker: ProcessInvoker,
        artifacts: ArtifactManager,
        transcoder: AudioTranscoder | None = None,
        max_chunk_chars: int = PICO_MAX_CHUNK_CHARS,
        chunker: TextChunker | None = None,
        merger: AudioMerger | None = None,
    ) -> None:
        self.invoker = invoker
        self.artifacts = artifacts
        self.transcoder = transcoder if transcoder is not None else AudioTranscoder(invoker)
        self.max_chunk_chars = max_chunk_chars
        self.chunker = chunker if chunker is not None else TextChunker()
        self.merger = merger if merger is not None else AudioMerger()

    def probe(self, prober: AvailabilityProber) -> bool:
        return prober.is_available(self.name)

    def synthesize(self, text: str, language: str, output_path: Path) -> SynthesisOutcome:
        voice = pico_voice(language)

        def render(target: Path, scope: TempArtifactScope) -> int:
            chunk_paths: list[Path] = []
            for chunk in self.chunker.chunk(text, self.max_chunk_chars):
                if not chunk.text.strip():
                    continue
                chunk_path = scope.acquire(f"chunk-{chunk.index:04d}.wav")
                _run_checked(
                    self.invoker,
                    self.name,
                    ["-l", voice.voice_id, "-w", str(chunk_path), chunk.text],
                )
                chunk_paths.append(chunk_path)
            if not chunk_paths:
                raise PipelineStageError(
                    stage=_STAGE,
                    kind=ErrorKind.SYNTHESIS,
                    detail="pico2wave received no speakable text.",
                )
            logger.debug("pico2wave rendered {} chunk(s)", len(chunk_paths))
            try:
                self.merger.merge(chunk_paths, target)
            except (ValueError, EOFError) as exc:
                raise PipelineStageError(
                    stage=_STAGE,
                    kind=ErrorKind.SYNTHESIS,
                    detail=f"Could not merge pico2wave chunk audio: {exc}",
                ) from exc
            return len(chunk_paths)

        return _render_native(
            backend=self.name,
            native_suffix=".wav",
            output_path=output_path,
            artifacts=self.artifacts,
            transcoder=self.transcoder,
            render=render,
        )


class MacSayBackend:
    """macOS `say`, which renders AIFF."""

    name = "say"
    platform_family: str | None = "macos"

    def __init__(
        self,
        invoker: ProcessInvoker,
        artifacts: ArtifactManager,
        transcoder: AudioTranscoder | None = None,
    ) -> None:
        self.invoker = invoker
        self.artifacts = artifacts
        self.transcoder = transcoder if transcoder is not None else AudioTranscoder(invoker)

    def probe(self, prober: AvailabilityProber) -> bool:
        return prober.is_available(self.name)

    def synthesize(self, text: str, language: str, output_path: Path) -> SynthesisOutcome:
        voice = mac_voice(language)

        def render(target: Path, scope: TempArtifactScope) -> int:
            _run_checked(
                self.invoker,
                self.name,
                ["-v", voice.voice_id, "-o", str(target), text],
            )
            return 1

        return _render_native(
            backend=self.name,
            native_suffix=".aiff",
            output_path=output_path,
            artifacts=self.artifacts,
            transcoder=self.transcoder,
            render=render,
        )


class Pyttsx3Backend:
    """pyttsx3 driven in-process through the platform speech driver."""

    name = "pyttsx3"
    platform_family: str | None = None
    module_name = "pyttsx3"

    def __init__(
        self,
        invoker: ProcessInvoker,
        artifacts: ArtifactManager,
        transcoder: AudioTranscoder | None = None,
        rate: int = 150,
        volume: float = 0.9,
    ) -> None:
        self.artifacts = artifacts
        self.transcoder = transcoder if transcoder is not None else AudioTranscoder(invoker)
        self.rate = rate
        self.volume = volume

    def probe(self, prober: AvailabilityProber) -> bool:
        return prober.is_module_available(self.module_name)

    def synthesize(self, text: str, language: str, output_path: Path) -> SynthesisOutcome:
        def render(target: Path, scope: TempArtifactScope) -> int:
            self._save_to_file(text, language.strip().lower(), target)
            return 1

        return _render_native(
            backend=self.name,
            native_suffix=".wav",
            output_path=output_path,
            artifacts=self.artifacts,
            transcoder=self.transcoder,
            render=render,
        )

    def _save_to_file(self, text: str, language: str, target: Path) -> None:
        """Render speech with pyttsx3, picking the first voice matching `language`."""

        import pyttsx3

        try:
            engine = pyttsx3.init()
            for voice in engine.getProperty("voices"):
                voice_id = str(getattr(voice, "id", "")).lower()
                voice_name = str(getattr(voice, "name", "")).lower()
                if language in voice_id or language in voice_name:
                    engine.setProperty("voice", voice.id)
                    break
            engine.setProperty("rate", self.rate)
            engine.setProperty("volume", self.volume)
            engine.save_to_file(text, str(target))
            engine.runAndWait()
        except (RuntimeError, OSError) as exc:
            raise PipelineStageError(
                stage=_STAGE,
                kind=ErrorKind.SYNTHESIS,
                detail=f"pyttsx3 synthesis failed: {exc}",
                hint="Check that a platform speech driver (espeak, SAPI5, NSSpeech) works.",
            ) from exc

        if not target.is_file():
            raise PipelineStageError(
                stage=_STAGE,
                kind=ErrorKind.SYNTHESIS,
                detail="pyttsx3 finished without writing an audio file.",
            )


def build_default_backends(
    invoker: ProcessInvoker,
    artifacts: ArtifactManager,
    max_chunk_chars: int = PICO_MAX_CHUNK_CHARS,
) -> list[SynthesisBackend]:
    """Return the backends in fixed preference order."""

    transcoder = AudioTranscoder(invoker)
    return [
        EspeakBackend(invoker, artifacts, transcoder),
        Pico2WaveBackend(invoker, artifacts, transcoder, max_chunk_chars=max_chunk_chars),
        MacSayBackend(invoker, artifacts, transcoder),
        Pyttsx3Backend(invoker, artifacts, transcoder),
    ]


def _render_native(
    *,
    backend: str,
    native_suffix: str,
    output_path: Path,
    artifacts: ArtifactManager,
    transcoder: AudioTranscoder,
    render: Callable[[Path, TempArtifactScope], int],
) -> SynthesisOutcome:
    """Render in the backend's native format, converting when the output differs."""

    with artifacts.scope(f"tts-{backend}") as scope:
        if output_path.suffix.lower() == native_suffix:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            chunk_count = render(output_path, scope)
        else:
            native_path = scope.acquire(f"speech{native_suffix}")
            chunk_count = render(native_path, scope)
            transcoder.convert(native_path, output_path, stage=_STAGE)
    return SynthesisOutcome(backend=backend, output_path=output_path, chunk_count=chunk_count)


def _run_checked(invoker: ProcessInvoker, command_name: str, arguments: Sequence[str]) -> None:
    """Run a backend command and raise a stage error on nonzero exit."""

    result = invoker.run(command_name, arguments)
    if not result.succeeded:
        raise PipelineStageError(
            stage=_STAGE,
            kind=ErrorKind.NON_ZERO_EXIT,
            detail=(
                f"{command_name} failed with exit code {result.exit_code}: "
                f"{result.output_tail() or 'no output'}"
            ),
            hint=f"Run `{command_name}` manually to check the installed voices.",
        )
