"""Configuration model and loaders for podtranslate.

Responsibilities:
- Define runtime configuration as an immutable typed dataclass.
- Provide loader entry points for YAML-, environment-, and mapping-based configuration.
- Derive the immutable `PipelineJob` handed to the orchestrator.

Key types:
- `TranslatorConfig`: normalized settings for one pipeline run.
- `ConfigLoader`: static construction helpers for `TranslatorConfig`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from hashlib import sha256
import json
import os
from pathlib import Path
import tempfile
from typing import Any, Mapping

import yaml

from .llm.ollama_client import DEFAULT_OLLAMA_URL
from .llm.prompts import DEFAULT_TRANSCRIPTION_CONTEXT
from .models.datatypes import PipelineJob
from .parsing import normalize_optional_string, parse_word_hints
from .tts.backends import PICO_MAX_CHUNK_CHARS


_DEFAULT_MODEL = "llama3.1"
_DEFAULT_WHISPER_PATH = "whisper-cli"
_DEFAULT_WHISPER_MODEL = "models/ggml-base.bin"
_DEFAULT_OUTPUT_AUDIO = Path("translated.wav")
_DEFAULT_SOURCE_LANGUAGE = "en"
_DEFAULT_TARGET_LANGUAGE = "nl"


def default_work_dir() -> Path:
    """Return the scratch directory used when none is configured."""

    return Path(tempfile.gettempdir()) / "podtranslate"


@dataclass(frozen=True, slots=True)
class TranslatorConfig:
    """Runtime configuration for one pipeline run.

    Attributes:
        input_media: Source audio or video file.
        output_audio: Destination of the translated speech audio.
        source_language: Spoken language of the input.
        target_language: Language of the produced speech.
        model: Ollama model used for enhance and translate.
        whisper_path: whisper.cpp CLI executable name or path.
        whisper_model: Path to the whisper.cpp model file.
        word_hints: Proper nouns that prime the transcription engine.
        episode_context: Optional free-text context for this episode.
        transcription_context: Fixed domain preamble of the transcription prompt.
        ollama_url: Base URL of the Ollama service.
        work_dir: Scratch directory for temporary artifacts.
        chunk_size_chars: Chunk bound for length-limited synthesis backends.
        request_timeout_seconds: Optional timeout for generate requests.
    """

    input_media: Path
    output_audio: Path = _DEFAULT_OUTPUT_AUDIO
    source_language: str = _DEFAULT_SOURCE_LANGUAGE
    target_language: str = _DEFAULT_TARGET_LANGUAGE
    model: str = _DEFAULT_MODEL
    whisper_path: str = _DEFAULT_WHISPER_PATH
    whisper_model: str = _DEFAULT_WHISPER_MODEL
    word_hints: tuple[str, ...] = field(default_factory=tuple)
    episode_context: str = ""
    transcription_context: str = DEFAULT_TRANSCRIPTION_CONTEXT
    ollama_url: str = DEFAULT_OLLAMA_URL
    work_dir: Path = field(default_factory=default_work_dir)
    chunk_size_chars: int = PICO_MAX_CHUNK_CHARS
    request_timeout_seconds: float | None = None

    def validate(self) -> None:
        """Validate configuration values before pipeline execution."""

        self._require_non_empty(self.source_language, "source_language")
        self._require_non_empty(self.target_language, "target_language")
        self._require_non_empty(self.model, "model")
        self._require_non_empty(self.whisper_path, "whisper_path")
        self._require_non_empty(self.whisper_model, "whisper_model")
        self._require_non_empty(self.ollama_url, "ollama_url")
        if self.chunk_size_chars <= 0:
            raise ValueError("`chunk_size_chars` must be a positive integer.")
        if self.request_timeout_seconds is not None and self.request_timeout_seconds <= 0:
            raise ValueError("`request_timeout_seconds` must be a positive number.")
        if self.output_audio.suffix == "":
            raise ValueError("`output_audio` must have a file extension such as `.wav`.")

    def to_job(self) -> PipelineJob:
        """Return the immutable job description for the orchestrator."""

        return PipelineJob(
            input_media=self.input_media,
            source_language=self.source_language,
            target_language=self.target_language,
            model=self.model,
            output_audio=self.output_audio,
            word_hints=self.word_hints,
            episode_context=self.episode_context,
        )

    def job_token(self) -> str:
        """Return a short token derived from job-defining fields, used in temp names."""

        payload = {
            "input_media": str(self.input_media),
            "output_audio": str(self.output_audio),
            "source_language": self.source_language,
            "target_language": self.target_language,
            "model": self.model,
        }
        canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"))
        return f"job-{sha256(canonical.encode('utf-8')).hexdigest()[:12]}"

    @staticmethod
    def _require_non_empty(value: str, field_name: str) -> None:
        """Validate that string fields are not empty."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")


class ConfigLoader:
    """Factory methods for creating `TranslatorConfig` from external sources."""

    _REQUIRED_KEYS = frozenset({"input_media"})
    _SUPPORTED_KEYS = frozenset(
        {
            "input_media",
            "output_audio",
            "source_language",
            "target_language",
            "model",
            "whisper_path",
            "whisper_model",
            "word_hints",
            "episode_context",
            "transcription_context",
            "ollama_url",
            "work_dir",
            "chunk_size_chars",
            "request_timeout_seconds",
        }
    )
    _ENV_PREFIX = "PODTRANSLATE_"

    @staticmethod
    def from_yaml(path: Path) -> TranslatorConfig:
        """Create a validated config from a YAML file."""

        payload = ConfigLoader.load_yaml_payload(path)
        return ConfigLoader.from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def load_yaml_payload(path: Path) -> dict[str, Any]:
        """Read a YAML file and enforce a flat mapping root."""

        raw_text = path.read_text(encoding="utf-8")
        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` could not be parsed: {exc}") from exc

        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return dict(payload)

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> TranslatorConfig:
        """Create a validated config from `PODTRANSLATE_*` environment variables."""

        payload = ConfigLoader.load_env_payload(env)
        return ConfigLoader.from_mapping(payload, source_label="environment")

    @staticmethod
    def load_env_payload(env: Mapping[str, str] | None = None) -> dict[str, Any]:
        """Collect supported keys from `PODTRANSLATE_*` variables without validating them."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        return {
            key: env_map[ConfigLoader._ENV_PREFIX + key.upper()]
            for key in ConfigLoader._SUPPORTED_KEYS
            if ConfigLoader._ENV_PREFIX + key.upper() in env_map
        }

    @staticmethod
    def from_mapping(payload: Mapping[str, Any], source_label: str) -> TranslatorConfig:
        """Build a validated config from a flat key-value mapping."""

        ConfigLoader._validate_keys(payload, source_label)

        defaults = TranslatorConfig(input_media=Path("."))
        input_media = ConfigLoader._required_path(payload, "input_media", source_label)
        try:
            word_hints = parse_word_hints(payload.get("word_hints"))
        except ValueError as exc:
            raise ValueError(f"{source_label} field `word_hints`: {exc}") from exc

        config = TranslatorConfig(
            input_media=input_media,
            output_audio=ConfigLoader._optional_path(payload, "output_audio")
            or defaults.output_audio,
            source_language=ConfigLoader._optional_string(payload, "source_language")
            or defaults.source_language,
            target_language=ConfigLoader._optional_string(payload, "target_language")
            or defaults.target_language,
            model=ConfigLoader._optional_string(payload, "model") or defaults.model,
            whisper_path=ConfigLoader._optional_string(payload, "whisper_path")
            or defaults.whisper_path,
            whisper_model=ConfigLoader._optional_string(payload, "whisper_model")
            or defaults.whisper_model,
            word_hints=word_hints,
            episode_context=ConfigLoader._optional_string(payload, "episode_context") or "",
            transcription_context=ConfigLoader._optional_string(payload, "transcription_context")
            or defaults.transcription_context,
            ollama_url=ConfigLoader._optional_string(payload, "ollama_url")
            or defaults.ollama_url,
            work_dir=ConfigLoader._optional_path(payload, "work_dir") or defaults.work_dir,
            chunk_size_chars=ConfigLoader._optional_positive_int(
                payload, "chunk_size_chars", source_label, default=defaults.chunk_size_chars
            ),
            request_timeout_seconds=ConfigLoader._optional_positive_float(
                payload, "request_timeout_seconds", source_label
            ),
        )
        config.validate()
        return config

    @staticmethod
    def _validate_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Validate supported and required keys."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_KEYS))
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        missing = sorted(key for key in ConfigLoader._REQUIRED_KEYS if key not in payload)
        if missing:
            key_list = ", ".join(missing)
            raise ValueError(f"{source_label} is missing required key(s): {key_list}.")

    @staticmethod
    def _required_path(payload: Mapping[str, Any], key: str, source_label: str) -> Path:
        """Read a required non-empty path-like field from a payload."""

        value = normalize_optional_string(payload.get(key))
        if value is None:
            raise ValueError(f"{source_label} requires non-empty `{key}`.")
        return Path(value)

    @staticmethod
    def _optional_path(payload: Mapping[str, Any], key: str) -> Path | None:
        value = normalize_optional_string(payload.get(key))
        return Path(value) if value is not None else None

    @staticmethod
    def _optional_string(payload: Mapping[str, Any], key: str) -> str | None:
        return normalize_optional_string(payload.get(key))

    @staticmethod
    def _optional_positive_int(
        payload: Mapping[str, Any], key: str, source_label: str, default: int
    ) -> int:
        """Read and validate a positive integer payload field."""

        if key not in payload:
            return default

        raw_value = payload[key]
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        if isinstance(raw_value, int):
            parsed = raw_value
        else:
            normalized = normalize_optional_string(raw_value)
            if normalized is None:
                return default
            try:
                parsed = int(normalized)
            except ValueError as exc:
                raise ValueError(
                    f"{source_label} field `{key}` must be a positive integer."
                ) from exc

        if parsed <= 0:
            raise ValueError(f"{source_label} field `{key}` must be a positive integer.")
        return parsed

    @staticmethod
    def _optional_positive_float(
        payload: Mapping[str, Any], key: str, source_label: str
    ) -> float | None:
        """Read an optional positive number; blank values mean "not set"."""

        raw_value = payload.get(key)
        if isinstance(raw_value, bool):
            raise ValueError(f"{source_label} field `{key}` must be a positive number.")
        normalized = normalize_optional_string(raw_value)
        if normalized is None:
            return None
        try:
            parsed = float(normalized)
        except ValueError as exc:
            raise ValueError(f"{source_label} field `{key}` must be a positive number.") from exc
        if parsed <= 0:
            raise ValueError(f"{source_label} field `{key}` must be a positive number.")
        return parsed
