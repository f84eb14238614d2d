"""Lossless concatenation of per-chunk WAV files.

Responsibilities:
- Merge chunk audio into one output in the given order.
- Refuse to mix WAV files with different channel, width, or rate parameters.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
import wave


def _pcm_format(wav_file: wave.Wave_read) -> tuple[int, int, int]:
    return wav_file.getnchannels(), wav_file.getsampwidth(), wav_file.getframerate()


class AudioMerger:
    """Merge WAV parts into one WAV output without re-encoding."""

    def merge(self, parts: Sequence[Path], output_path: Path) -> Path:
        """Concatenate `parts` in order into `output_path`.

        The first part fixes the PCM format of the output.

        Raises:
            ValueError: If no parts are given or their PCM parameters differ.
        """

        if not parts:
            raise ValueError("At least one WAV part is required for merging.")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        with wave.open(str(parts[0]), "rb") as first:
            expected = _pcm_format(first)

        with wave.open(str(output_path), "wb") as merged:
            channels, sample_width, framerate = expected
            merged.setnchannels(channels)
            merged.setsampwidth(sample_width)
            merged.setframerate(framerate)
            for part in parts:
                with wave.open(str(part), "rb") as source:
                    if _pcm_format(source) != expected:
                        raise ValueError(f"Incompatible WAV parameters for chunk: {part}")
                    merged.writeframes(source.readframes(source.getnframes()))

        return output_path
