"""Command-line interface for podtranslate.

Responsibilities:
- Expose user-facing commands for translation runs and environment checks.
- Convert CLI arguments into `TranslatorConfig` and execute the pipeline.

Key public functions:
- `app`: Typer application instance.
- `main`: invoke the Typer application.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer

from .cli_rendering import echo_backend_rows, echo_run_summary, exit_with_command_error
from .config import ConfigLoader, TranslatorConfig, default_work_dir
from .errors import ErrorKind, PipelineStageError
from .io.artifacts import ArtifactManager
from .llm.ollama_client import DEFAULT_OLLAMA_URL, OllamaClient
from .pipeline import MediaTranslationPipeline
from .process import ProcessInvoker
from .runtime_tools import AvailabilityProber
from .telemetry.logger import RunLogger
from .tts.backends import PICO_MAX_CHUNK_CHARS, build_default_backends
from .tts.selector import EngineSelector

app = typer.Typer(
    name="podtranslate",
    no_args_is_help=True,
    help="Translate spoken-word audio into another language with local tools.",
)


class BuildProgressIndicator:
    """Render deterministic per-stage progress lines for long-running commands."""

    _SPINNER_FRAMES = "|/-\\"

    def __init__(self, command_name: str) -> None:
        """Initialize progress indicator metadata for a command invocation."""

        self._command_name = command_name

    def on_stage_start(self, stage_name: str, stage_index: int, stage_total: int) -> None:
        """Print one progress line for a stage start transition."""

        spinner = self._SPINNER_FRAMES[(stage_index - 1) % len(self._SPINNER_FRAMES)]
        typer.echo(
            f"[progress] command={self._command_name} "
            f"{spinner} {stage_index}/{stage_total} stage={stage_name}"
        )


def _load_yaml_payload(config_path: Path | None) -> dict[str, Any]:
    """Load a YAML config mapping when requested and map failures to stage errors."""

    if config_path is None:
        return {}

    try:
        return ConfigLoader.load_yaml_payload(config_path)
    except FileNotFoundError as exc:
        raise PipelineStageError(
            stage="config",
            kind=ErrorKind.CONFIG,
            detail=f"Config file not found: `{config_path}`.",
            hint="Provide an existing path via `--config <path.yaml>`.",
        ) from exc
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            kind=ErrorKind.CONFIG,
            detail=str(exc),
            hint="Fix the YAML syntax and rerun.",
        ) from exc
    except OSError as exc:
        raise PipelineStageError(
            stage="config",
            kind=ErrorKind.IO,
            detail=f"Failed to read config file `{config_path}`: {exc}",
            hint="Verify file permissions.",
        ) from exc


def _resolve_command_config(
    config_file: Path | None,
    overrides: dict[str, object | None],
) -> TranslatorConfig:
    """Resolve effective config: environment, then YAML file, then explicit CLI options."""

    payload = ConfigLoader.load_env_payload()
    payload.update(_load_yaml_payload(config_file))
    for key, value in overrides.items():
        if value is not None:
            payload[key] = value

    if "input_media" not in payload:
        raise PipelineStageError(
            stage="config",
            kind=ErrorKind.CONFIG,
            detail="Input media path is required when `--config` does not provide `input_media`.",
            hint="Pass `<input>` or use `--config <path.yaml>` with `input_media`.",
        )

    source_label = f"YAML `{config_file}`" if config_file is not None else "CLI options"
    try:
        return ConfigLoader.from_mapping(payload, source_label=source_label)
    except ValueError as exc:
        raise PipelineStageError(
            stage="config",
            kind=ErrorKind.CONFIG,
            detail=str(exc),
            hint="Fix config schema/values and rerun.",
        ) from exc


@app.command("translate")
def translate_command(
    input_media: Annotated[
        Path | None,
        typer.Argument(help="Audio or video file to translate. Required unless set by `--config`."),
    ] = None,
    out: Annotated[
        Path | None,
        typer.Option("--out", help="Output audio file (extension selects the format)."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file with run defaults."),
    ] = None,
    source_language: Annotated[
        str | None, typer.Option("--source-language", help="Spoken language code of the input.")
    ] = None,
    target_language: Annotated[
        str | None, typer.Option("--target-language", help="Language code of the output speech.")
    ] = None,
    model: Annotated[
        str | None, typer.Option("--model", help="Ollama model for cleanup and translation.")
    ] = None,
    whisper_path: Annotated[
        str | None, typer.Option("--whisper-path", help="whisper.cpp CLI executable.")
    ] = None,
    whisper_model: Annotated[
        str | None, typer.Option("--whisper-model", help="whisper.cpp model file.")
    ] = None,
    word_hints: Annotated[
        str | None,
        typer.Option("--word-hints", help="Comma-separated names that help transcription."),
    ] = None,
    episode_context: Annotated[
        str | None,
        typer.Option("--episode-context", help="Free-text context about this recording."),
    ] = None,
    ollama_url: Annotated[
        str | None, typer.Option("--ollama-url", help="Base URL of the Ollama service.")
    ] = None,
    work_dir: Annotated[
        Path | None, typer.Option("--work-dir", help="Scratch directory for temporary files.")
    ] = None,
    chunk_size: Annotated[
        int | None,
        typer.Option("--chunk-size", help="Chunk bound for length-limited synthesizers."),
    ] = None,
    verbose: Annotated[
        bool, typer.Option("--verbose", help="Show external tool output.")
    ] = False,
) -> None:
    """Run the full translation pipeline."""

    try:
        config = _resolve_command_config(
            config_file,
            {
                "input_media": input_media,
                "output_audio": out,
                "source_language": source_language,
                "target_language": target_language,
                "model": model,
                "whisper_path": whisper_path,
                "whisper_model": whisper_model,
                "word_hints": word_hints,
                "episode_context": episode_context,
                "ollama_url": ollama_url,
                "work_dir": work_dir,
                "chunk_size_chars": chunk_size,
            },
        )
        progress = BuildProgressIndicator(command_name="translate")
        pipeline = MediaTranslationPipeline(
            run_logger=RunLogger(verbose=verbose),
            stage_progress_callback=progress.on_stage_start,
        )
        summary = pipeline.run(config)
    except Exception as exc:
        exit_with_command_error("translate", exc)

    echo_run_summary(summary)


@app.command("backends")
def backends_command(
    work_dir: Annotated[
        Path | None, typer.Option("--work-dir", help="Scratch directory for temporary files.")
    ] = None,
) -> None:
    """List speech synthesis backends in preference order and their availability."""

    try:
        invoker = ProcessInvoker()
        scratch = work_dir if work_dir is not None else default_work_dir()
        backends = build_default_backends(
            invoker,
            ArtifactManager(scratch, "probe"),
            PICO_MAX_CHUNK_CHARS,
        )
        rows = EngineSelector(backends, AvailabilityProber(invoker)).report()
    except Exception as exc:
        exit_with_command_error("backends", exc)

    echo_backend_rows(rows)


def _resolve_ollama_url(config_file: Path | None, ollama_url: str | None) -> str:
    """Pick the Ollama URL from CLI option, then YAML file, then environment."""

    if ollama_url:
        return ollama_url
    for payload in (_load_yaml_payload(config_file), ConfigLoader.load_env_payload()):
        value = payload.get("ollama_url")
        if value is None:
            continue
        if not isinstance(value, str) or not value.strip():
            raise PipelineStageError(
                stage="config",
                kind=ErrorKind.CONFIG,
                detail="Field `ollama_url` must be a non-empty string.",
                hint="Fix config schema/values and rerun.",
            )
        return value.strip()
    return DEFAULT_OLLAMA_URL


@app.command("check-service")
def check_service_command(
    ollama_url: Annotated[
        str | None,
        typer.Option("--ollama-url", help="Base URL of the Ollama service."),
    ] = None,
    config_file: Annotated[
        Path | None,
        typer.Option("--config", help="Path to YAML config file that may set `ollama_url`."),
    ] = None,
) -> None:
    """Check that the Ollama service answers its version endpoint."""

    try:
        resolved_url = _resolve_ollama_url(config_file, ollama_url)
    except PipelineStageError as exc:
        exit_with_command_error("check-service", exc)

    if not OllamaClient(base_url=resolved_url).is_alive():
        exit_with_command_error(
            "check-service",
            PipelineStageError(
                stage="preflight",
                kind=ErrorKind.SERVICE_UNAVAILABLE,
                detail=f"Ollama service is not running at `{resolved_url}`.",
                hint="Start Ollama first (`ollama serve`).",
            ),
        )
    typer.echo(f"Ollama service is reachable at {resolved_url}")


def main() -> None:
    """CLI entrypoint for console scripts."""
    app()


if __name__ == "__main__":
    main()
