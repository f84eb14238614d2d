"""whisper.cpp command-line transcription adapter.

Responsibilities:
- Write the context prompt to a scratch file and pass it to the engine.
- Invoke the engine with JSON output into a scratch location.
- Parse the produced JSON into a `TranscriptDocument`.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

from ..errors import ErrorKind, PipelineStageError
from ..io.artifacts import ArtifactManager
from ..llm.prompts import PromptLibrary
from ..models.datatypes import PipelineJob, TranscriptDocument, TranscriptSegment
from ..process import ProcessInvoker


class WhisperTranscriber:
    """Run the whisper.cpp CLI and read back its JSON transcript."""

    _STAGE = "transcribe"

    def __init__(
        self,
        invoker: ProcessInvoker,
        executable: str,
        model_path: str,
        prompts: PromptLibrary | None = None,
    ) -> None:
        self.invoker = invoker
        self.executable = executable
        self.model_path = model_path
        self.prompts = prompts if prompts is not None else PromptLibrary()

    def transcribe(
        self,
        job: PipelineJob,
        audio_path: Path,
        artifacts: ArtifactManager,
    ) -> TranscriptDocument:
        """Transcribe `audio_path`; prompt and JSON scratch files never outlive this call."""

        with artifacts.scope(self._STAGE) as scope:
            prompt_path = scope.write_text(
                "prompt.txt",
                self.prompts.transcription_prompt(job.word_hints, job.episode_context),
            )
            transcript_path = scope.acquire("transcript.json")
            output_base = transcript_path.with_suffix("")

            result = self.invoker.run(
                self.executable,
                [
                    "--model",
                    self.model_path,
                    "--language",
                    job.source_language,
                    "--output-json",
                    "--output-file",
                    str(output_base),
                    "--prompt",
                    prompt_path.read_text(encoding="utf-8"),
                    str(audio_path),
                ],
            )
            for line in result.output.splitlines():
                logger.debug("whisper: {}", line)

            if not result.succeeded:
                raise PipelineStageError(
                    stage=self._STAGE,
                    kind=ErrorKind.TRANSCRIPTION,
                    detail=(
                        f"Transcription engine exited with code {result.exit_code}: "
                        f"{result.output_tail() or 'no output'}"
                    ),
                    hint="Check `whisper_path`, `whisper_model`, and the source language code.",
                )
            return self._read_transcript(transcript_path)

    def _read_transcript(self, transcript_path: Path) -> TranscriptDocument:
        """Load and parse the engine's JSON output file."""

        # whisper.cpp can split multi-byte characters across tokens.
        try:
            raw = transcript_path.read_text(encoding="utf-8", errors="replace")
        except FileNotFoundError as exc:
            raise PipelineStageError(
                stage=self._STAGE,
                kind=ErrorKind.PARSE,
                detail=f"Transcription engine did not write `{transcript_path.name}`.",
                hint="Make sure the engine supports `--output-json` and `--output-file`.",
            ) from exc

        try:
            payload = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise PipelineStageError(
                stage=self._STAGE,
                kind=ErrorKind.PARSE,
                detail=f"Transcript JSON is malformed: {exc.msg}.",
            ) from exc

        if not isinstance(payload, dict) or "transcription" not in payload:
            raise PipelineStageError(
                stage=self._STAGE,
                kind=ErrorKind.PARSE,
                detail="Transcript JSON is missing the `transcription` field.",
            )
        return self._document_from_transcription(payload["transcription"])

    def _document_from_transcription(self, transcription: Any) -> TranscriptDocument:
        """Convert the `transcription` field (text or segment list) into a document."""

        if isinstance(transcription, str):
            return TranscriptDocument(text=transcription.strip())

        if not isinstance(transcription, list):
            raise PipelineStageError(
                stage=self._STAGE,
                kind=ErrorKind.PARSE,
                detail="Transcript `transcription` field must be text or a list of segments.",
            )

        segments: list[TranscriptSegment] = []
        for item in transcription:
            if not isinstance(item, dict) or not isinstance(item.get("text"), str):
                raise PipelineStageError(
                    stage=self._STAGE,
                    kind=ErrorKind.PARSE,
                    detail="Transcript segment is missing its `text` field.",
                )
            offsets = item.get("offsets") if isinstance(item.get("offsets"), dict) else {}
            segments.append(
                TranscriptSegment(
                    start_ms=_optional_int(offsets.get("from")),
                    end_ms=_optional_int(offsets.get("to")),
                    text=item["text"].strip(),
                )
            )
        text = " ".join(segment.text for segment in segments if segment.text)
        return TranscriptDocument(text=text, segments=tuple(segments))


def _optional_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value
