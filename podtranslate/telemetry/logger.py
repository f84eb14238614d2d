"""Structured run logging utilities.

Responsibilities:
- Emit concise, deterministic phase-level runtime logs through `loguru`.
- Keep tool chatter at debug level unless verbose output is requested.
"""

from __future__ import annotations

import re
import sys
from typing import TextIO

from loguru import logger

_UNSAFE_TOKEN_CHARS = re.compile(r"[^\w\-.:/]")


def _context_token(value: object) -> str:
    """Render one context value as a single whitespace-free token."""

    text = str(value).strip()
    return _UNSAFE_TOKEN_CHARS.sub("_", text) if text else "none"


def _render_line(level: str, stage: str, event: str, context: dict[str, object]) -> str:
    """Build one `[phase]` line; context keys are emitted alphabetically."""

    parts = [f"[phase] level={level}", f"stage={stage}", f"event={event}"]
    parts.extend(f"{key}={_context_token(context[key])}" for key in sorted(context))
    return " ".join(parts)


class RunLogger:
    """Emit deterministic phase logs for CLI-observable pipeline activity."""

    def __init__(self, sink: TextIO | None = None, verbose: bool = False) -> None:
        """Route loguru output to `sink`, at DEBUG level when `verbose` is set."""

        self._sink = sink or sys.stdout
        logger.remove()
        logger.add(
            self._sink,
            format="{message}",
            level="DEBUG" if verbose else "INFO",
            colorize=False,
        )

    def _emit(self, level: str, event: str, stage: str, **context: object) -> None:
        logger.log(level, _render_line(level, stage, event, context))

    def log_stage_start(self, stage: str) -> None:
        self._emit("INFO", "start", stage)

    def log_stage_complete(self, stage: str) -> None:
        self._emit("INFO", "complete", stage)

    def log_stage_failure(self, stage: str, error_kind: str) -> None:
        """Emit a stage-failure event carrying only the error kind, never the detail."""

        self._emit("ERROR", "failure", stage, error_kind=error_kind)

    def log_event(self, stage: str, event: str, **context: object) -> None:
        """Emit a named informational event inside a stage."""

        self._emit("INFO", event, stage, **context)
