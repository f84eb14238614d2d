"""Domain exceptions for pipeline and CLI diagnostics."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Failure categories shared by every pipeline stage."""

    IO = "io"
    SPAWN_FAILURE = "spawn_failure"
    NON_ZERO_EXIT = "non_zero_exit"
    TRANSCRIPTION = "transcription"
    SERVICE_UNAVAILABLE = "service_unavailable"
    PARSE = "parse"
    UNAVAILABLE = "unavailable"
    UNSUPPORTED_FORMAT = "unsupported_format"
    SYNTHESIS = "synthesis"
    CONFIG = "config"


class PipelineStageError(RuntimeError):
    """Raised when a specific pipeline stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        kind: ErrorKind,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped pipeline error."""

        super().__init__(detail)
        self.stage = stage
        self.kind = kind
        self.detail = detail
        self.hint = hint


class ProcessSpawnError(RuntimeError):
    """Raised when an external executable cannot be launched at all."""

    def __init__(self, command_name: str, reason: str) -> None:
        super().__init__(f"Could not launch `{command_name}`: {reason}")
        self.command_name = command_name
        self.reason = reason
