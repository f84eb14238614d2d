"""ffmpeg-based audio format conversion."""

from __future__ import annotations

from pathlib import Path

from ..errors import ErrorKind, PipelineStageError
from ..process import ProcessInvoker


class AudioTranscoder:
    """Convert one audio file into the format implied by the target suffix."""

    def __init__(self, invoker: ProcessInvoker, ffmpeg_command: str = "ffmpeg") -> None:
        self.invoker = invoker
        self.ffmpeg_command = ffmpeg_command

    def convert(self, source: Path, target: Path, *, stage: str = "synthesize") -> Path:
        """Transcode `source` into `target`, overwriting any existing file."""

        target.parent.mkdir(parents=True, exist_ok=True)
        result = self.invoker.run(
            self.ffmpeg_command,
            [
                "-y",
                "-hide_banner",
                "-loglevel",
                "error",
                "-i",
                str(source),
                str(target),
            ],
        )
        if not result.succeeded:
            raise PipelineStageError(
                stage=stage,
                kind=ErrorKind.NON_ZERO_EXIT,
                detail=(
                    f"ffmpeg conversion to `{target.name}` failed with exit code "
                    f"{result.exit_code}: {result.output_tail() or 'no output'}"
                ),
                hint="Verify ffmpeg is installed and supports the output format.",
            )
        return target
