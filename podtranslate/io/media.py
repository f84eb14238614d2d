"""Source audio preparation for the transcription stage.

Responsibilities:
- Pass audio that whisper.cpp decodes natively (WAV, MP3, FLAC, OGG) through unchanged.
- Convert other audio formats and video containers into a scratch WAV with ffmpeg.
- Reject inputs whose extension is not recognized.
"""

from __future__ import annotations

from pathlib import Path

from ..errors import ErrorKind, PipelineStageError
from ..process import ProcessInvoker
from .artifacts import TempArtifactScope


class MediaExtractor:
    """Locate or extract the audio track of one input media file."""

    _STAGE = "extract"
    # Formats whisper.cpp decodes itself; everything else is demuxed first.
    _WHISPER_NATIVE_SUFFIXES = frozenset({".wav", ".mp3", ".flac", ".ogg"})
    _DEMUX_SUFFIXES = frozenset(
        {".m4a", ".aac", ".opus", ".mp4", ".m4v", ".mov", ".mkv", ".webm", ".avi"}
    )

    def __init__(self, invoker: ProcessInvoker, ffmpeg_command: str = "ffmpeg") -> None:
        self.invoker = invoker
        self.ffmpeg_command = ffmpeg_command

    def prepare(self, input_media: Path, scope: TempArtifactScope) -> Path:
        """Return a path to standalone audio for `input_media`.

        Other inputs are converted to 16 kHz mono PCM WAV inside `scope`, so the
        extracted file lives exactly as long as the caller keeps the scope open.
        """

        if not input_media.is_file():
            raise PipelineStageError(
                stage=self._STAGE,
                kind=ErrorKind.IO,
                detail=f"Input media not found: `{input_media}`.",
                hint="Check the input path or the `input_media` config value.",
            )

        suffix = input_media.suffix.lower()
        if suffix in self._WHISPER_NATIVE_SUFFIXES:
            return input_media
        if suffix not in self._DEMUX_SUFFIXES:
            supported = ", ".join(sorted(self._WHISPER_NATIVE_SUFFIXES | self._DEMUX_SUFFIXES))
            raise PipelineStageError(
                stage=self._STAGE,
                kind=ErrorKind.UNSUPPORTED_FORMAT,
                detail=f"Unsupported input format `{suffix or '(none)'}` for `{input_media.name}`.",
                hint=f"Use one of: {supported}.",
            )

        extracted = scope.acquire("source.wav")
        result = self.invoker.run(
            self.ffmpeg_command,
            [
                "-y",
                "-hide_banner",
                "-loglevel",
                "error",
                "-i",
                str(input_media),
                "-vn",
                "-ac",
                "1",
                "-ar",
                "16000",
                "-c:a",
                "pcm_s16le",
                str(extracted),
            ],
        )
        if not result.succeeded:
            raise PipelineStageError(
                stage=self._STAGE,
                kind=ErrorKind.NON_ZERO_EXIT,
                detail=(
                    f"ffmpeg audio extraction failed with exit code {result.exit_code}: "
                    f"{result.output_tail() or 'no output'}"
                ),
                hint="Verify the input file has an audio track and ffmpeg is installed.",
            )
        return extracted
