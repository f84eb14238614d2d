"""Pipeline orchestration for podtranslate.

Responsibilities:
- Define the stage order for one media translation job.
- Gate every stage on the success of the previous one.
- Publish the output audio only after synthesis fully succeeded.

Key types:
- `MediaTranslationPipeline`: orchestration facade.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
import os
from pathlib import Path

from ..config import TranslatorConfig
from ..errors import ErrorKind, PipelineStageError
from ..io.artifacts import ArtifactManager, TempArtifactScope
from ..io.media import MediaExtractor
from ..llm.enhancer import TranscriptEnhancer
from ..llm.ollama_client import OllamaClient
from ..llm.prompts import PromptLibrary
from ..llm.translator import OllamaTranslator
from ..models.datatypes import (
    PipelineJob,
    RunSummary,
    SynthesisOutcome,
    TranscriptDocument,
)
from ..process import ProcessInvoker
from ..runtime_tools import AvailabilityProber
from ..stt.whisper import WhisperTranscriber
from ..telemetry.logger import RunLogger
from ..tts.backends import SynthesisBackend, build_default_backends
from ..tts.selector import EngineSelector
from .telemetry import PipelineTelemetryMixin

BackendFactory = Callable[[ProcessInvoker, ArtifactManager, int], Sequence[SynthesisBackend]]


class MediaTranslationPipeline(PipelineTelemetryMixin):
    """Coordinate all stages for a single media translation job."""

    def __init__(
        self,
        run_logger: RunLogger | None = None,
        stage_progress_callback: Callable[[str, int, int], None] | None = None,
        invoker: ProcessInvoker | None = None,
        llm_client: OllamaClient | None = None,
        prober: AvailabilityProber | None = None,
        backend_factory: BackendFactory | None = None,
    ) -> None:
        """Initialize logging hooks and optional collaborator overrides."""

        self._run_logger = run_logger
        self._stage_progress_callback = stage_progress_callback
        self._invoker = invoker
        self._llm_client = llm_client
        self._prober = prober
        self._backend_factory = backend_factory or build_default_backends

    def run(self, config: TranslatorConfig) -> RunSummary:
        """Run preflight, extract, transcribe, enhance, translate, and synthesize."""

        self._validate_config(config)
        job = config.to_job()
        invoker = self._invoker if self._invoker is not None else ProcessInvoker()
        client = self._client_for(config)

        self._run_stage("preflight", lambda: self._preflight(client, config))

        artifacts = ArtifactManager(config.work_dir, config.job_token())
        prompts = PromptLibrary(config.transcription_context)
        transcriber = WhisperTranscriber(
            invoker,
            executable=config.whisper_path,
            model_path=config.whisper_model,
            prompts=prompts,
        )

        with artifacts.scope("extract") as media_scope:
            audio_path = self._run_stage(
                "extract",
                lambda: MediaExtractor(invoker).prepare(job.input_media, media_scope),
            )
            transcript = self._run_stage(
                "transcribe",
                lambda: self._transcribe(transcriber, job, audio_path, artifacts),
            )

        enhanced_text = self._run_stage(
            "enhance",
            lambda: self._require_text(
                TranscriptEnhancer(client, job.model, prompts).enhance(transcript.text),
                stage="enhance",
            ),
        )
        translated_text = self._run_stage(
            "translate",
            lambda: self._require_text(
                OllamaTranslator(client, job.model, prompts).translate(
                    enhanced_text, job.source_language, job.target_language
                ),
                stage="translate",
            ),
        )
        outcome = self._run_stage(
            "synthesize",
            lambda: self._synthesize(job, translated_text, invoker, artifacts, config),
        )

        return RunSummary(
            job=job,
            output_audio=outcome.output_path,
            backend=outcome.backend,
            transcript_chars=len(transcript.text),
            translation_chars=len(translated_text),
            chunk_count=outcome.chunk_count,
        )

    def _client_for(self, config: TranslatorConfig) -> OllamaClient:
        if self._llm_client is not None:
            return self._llm_client
        return OllamaClient(
            base_url=config.ollama_url,
            request_timeout_seconds=config.request_timeout_seconds,
        )

    def _validate_config(self, config: TranslatorConfig) -> None:
        """Validate top-level configuration and map failures to stage-aware error."""

        try:
            config.validate()
        except ValueError as exc:
            raise PipelineStageError(
                stage="config",
                kind=ErrorKind.CONFIG,
                detail=str(exc),
                hint="Update config or CLI options and rerun the command.",
            ) from exc

    def _preflight(self, client: OllamaClient, config: TranslatorConfig) -> None:
        """Abort before any work when the Ollama service does not answer."""

        if not client.is_alive():
            raise PipelineStageError(
                stage="preflight",
                kind=ErrorKind.SERVICE_UNAVAILABLE,
                detail=f"Ollama service is not running at `{config.ollama_url}`.",
                hint="Start Ollama first (`ollama serve`) and rerun the command.",
            )

    def _transcribe(
        self,
        transcriber: WhisperTranscriber,
        job: PipelineJob,
        audio_path: Path,
        artifacts: ArtifactManager,
    ) -> TranscriptDocument:
        transcript = transcriber.transcribe(job, audio_path, artifacts)
        self._require_text(transcript.text, stage="transcribe")
        self._log_event(
            "transcribe",
            "transcript_ready",
            chars=len(transcript.text),
            segments=len(transcript.segments),
        )
        return transcript

    def _require_text(self, text: str, *, stage: str) -> str:
        """Reject empty stage output so later stages never run on nothing."""

        if not text.strip():
            raise PipelineStageError(
                stage=stage,
                kind=ErrorKind.PARSE,
                detail=f"Stage `{stage}` produced no text.",
            )
        return text

    def _synthesize(
        self,
        job: PipelineJob,
        text: str,
        invoker: ProcessInvoker,
        artifacts: ArtifactManager,
        config: TranslatorConfig,
    ) -> SynthesisOutcome:
        """Select a backend, render into a staged file, then rename it into place."""

        prober = self._prober if self._prober is not None else AvailabilityProber(invoker)
        backends = self._backend_factory(invoker, artifacts, config.chunk_size_chars)
        backend = EngineSelector(backends, prober).select()
        self._log_event("synthesize", "backend_selected", backend=backend.name)

        # Staged beside the destination so the final rename stays on one filesystem.
        output_dir = job.output_audio.parent
        with TempArtifactScope(output_dir, f".{artifacts.job_token}-publish") as scope:
            staged_path = scope.acquire(f"output{job.output_audio.suffix}")
            outcome = backend.synthesize(text, job.target_language, staged_path)
            os.replace(staged_path, job.output_audio)

        self._log_event(
            "synthesize",
            "audio_written",
            backend=backend.name,
            chunks=outcome.chunk_count,
        )
        return SynthesisOutcome(
            backend=backend.name,
            output_path=job.output_audio,
            chunk_count=outcome.chunk_count,
        )
