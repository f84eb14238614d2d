"""CLI output and error rendering helpers.

This module centralizes user-facing CLI presentation for command diagnostics,
run summaries, and synthesis backend availability rows.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import NoReturn

import typer

from .errors import PipelineStageError
from .models.datatypes import RunSummary
from .tts.selector import BackendAvailability


def exit_with_command_error(command_name: str, exc: Exception) -> NoReturn:
    """Print concise diagnostics for command failures and exit with code 1."""

    if isinstance(exc, PipelineStageError):
        typer.secho(
            f"{command_name} failed at stage `{exc.stage}` ({exc.kind.value}): {exc.detail}",
            fg=typer.colors.RED,
            err=True,
        )
        if exc.hint:
            typer.secho(f"Hint: {exc.hint}", fg=typer.colors.YELLOW, err=True)
    else:
        typer.secho(f"{command_name} failed: {exc}", fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1) from exc


def echo_run_summary(summary: RunSummary) -> None:
    """Print the outcome of a finished translation run."""

    job = summary.job
    typer.echo(f"Input: {job.input_media}")
    typer.echo(f"Languages: {job.source_language} -> {job.target_language}")
    typer.echo(f"Model: {job.model}")
    typer.echo(f"Transcript chars: {summary.transcript_chars}")
    typer.echo(f"Translation chars: {summary.translation_chars}")
    typer.echo(f"Synthesis backend: {summary.backend} ({summary.chunk_count} chunk(s))")
    typer.echo(f"Output audio: {summary.output_audio}")


def echo_backend_rows(rows: Sequence[BackendAvailability]) -> None:
    """Print backends in preference order and mark the one that would be selected."""

    selected = next((row.name for row in rows if row.available), None)
    for position, row in enumerate(rows, start=1):
        if not row.platform_ok:
            status = f"skipped (requires {row.platform_family})"
        elif row.available:
            status = "available"
        else:
            status = "not found"
        marker = " <- selected" if row.name == selected else ""
        typer.echo(f"{position}. {row.name}: {status}{marker}")
    if selected is None:
        typer.echo("No synthesis backend available.")
