"""Deterministic stand-ins for external tools used across the test suite."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
import json
from pathlib import Path
import wave

from podtranslate.errors import ErrorKind, PipelineStageError
from podtranslate.models.datatypes import SynthesisOutcome
from podtranslate.process import CommandResult

Handler = Callable[[Sequence[str]], CommandResult]


def write_silent_wav(path: Path, frame_count: int = 1600, framerate: int = 16000) -> Path:
    """Write a short mono 16-bit silent WAV file."""

    path.parent.mkdir(parents=True, exist_ok=True)
    with wave.open(str(path), "wb") as wav_file:
        wav_file.setnchannels(1)
        wav_file.setsampwidth(2)
        wav_file.setframerate(framerate)
        wav_file.writeframes(b"\x00\x00" * frame_count)
    return path


def ok(command_name: str, arguments: Sequence[str], output: str = "") -> CommandResult:
    return CommandResult(command=(command_name, *arguments), output=output, exit_code=0)


def failed(
    command_name: str, arguments: Sequence[str], output: str = "boom", exit_code: int = 1
) -> CommandResult:
    return CommandResult(command=(command_name, *arguments), output=output, exit_code=exit_code)


class FakeInvoker:
    """Record invocations and dispatch them to per-command handlers."""

    def __init__(self, handlers: dict[str, Handler] | None = None) -> None:
        self.handlers = dict(handlers or {})
        self.calls: list[tuple[str, tuple[str, ...]]] = []

    def run(self, command_name: str, arguments: Sequence[str]) -> CommandResult:
        arguments = tuple(str(argument) for argument in arguments)
        self.calls.append((command_name, arguments))
        handler = self.handlers.get(command_name)
        if handler is None:
            return failed(command_name, arguments, output="not found")
        return handler(arguments)

    def commands(self) -> list[str]:
        return [command for command, _ in self.calls]


def whisper_handler(transcription: object) -> Handler:
    """Return a handler that writes whisper.cpp-style JSON next to `--output-file`."""

    def _handler(arguments: Sequence[str]) -> CommandResult:
        output_base = arguments[list(arguments).index("--output-file") + 1]
        Path(f"{output_base}.json").write_text(
            json.dumps({"transcription": transcription}), encoding="utf-8"
        )
        return ok("whisper-cli", arguments, output="whisper_init: loaded model")

    return _handler


def flag_writer_handler(command_name: str, flag: str) -> Handler:
    """Return a handler that writes a silent WAV to the path after `flag`."""

    def _handler(arguments: Sequence[str]) -> CommandResult:
        target = Path(arguments[list(arguments).index(flag) + 1])
        write_silent_wav(target)
        return ok(command_name, arguments)

    return _handler


def ffmpeg_handler(arguments: Sequence[str]) -> CommandResult:
    """Pretend to transcode by writing a silent WAV to the last argument."""

    write_silent_wav(Path(arguments[-1]))
    return ok("ffmpeg", arguments)


@dataclass
class FakeOllamaClient:
    """Answer liveness and generate calls from canned values."""

    alive: bool = True
    responses: dict[str, str] = field(default_factory=dict)
    failing_stage: str | None = None
    calls: list[tuple[str, str, str]] = field(default_factory=list)

    def is_alive(self) -> bool:
        return self.alive

    def generate(self, *, model: str, prompt: str, stage: str) -> str:
        self.calls.append((model, prompt, stage))
        if stage == self.failing_stage:
            raise PipelineStageError(
                stage=stage,
                kind=ErrorKind.SERVICE_UNAVAILABLE,
                detail="Ollama request failed (HTTP 500): model crashed",
            )
        return self.responses.get(stage, f"{stage} output.")


@dataclass
class StaticProber:
    """Prober with fixed answers, keyed by command or module name."""

    available: dict[str, bool] = field(default_factory=dict)
    platform_family: str = "linux"
    probed: list[str] = field(default_factory=list)

    def is_available(self, command_name: str) -> bool:
        self.probed.append(command_name)
        return self.available.get(command_name, False)

    def is_platform(self, family: str) -> bool:
        return self.platform_family == family

    def is_module_available(self, module_name: str) -> bool:
        self.probed.append(module_name)
        return self.available.get(module_name, False)


@dataclass
class FakeBackend:
    """Synthesis backend double that writes a silent WAV when asked."""

    name: str
    platform_family: str | None = None
    fail_with: Exception | None = None
    rendered: list[tuple[str, str, Path]] = field(default_factory=list)

    def probe(self, prober: StaticProber) -> bool:
        return prober.is_available(self.name)

    def synthesize(self, text: str, language: str, output_path: Path) -> SynthesisOutcome:
        self.rendered.append((text, language, output_path))
        if self.fail_with is not None:
            raise self.fail_with
        write_silent_wav(output_path)
        return SynthesisOutcome(backend=self.name, output_path=output_path)
