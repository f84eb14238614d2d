"""Unit tests for structured run logging."""

from __future__ import annotations

import io

from loguru import logger

from podtranslate.telemetry.logger import RunLogger


def test_run_logger_emits_deterministic_phase_lines() -> None:
    """Stage events are written as sorted key/value tokens."""

    sink = io.StringIO()
    run_logger = RunLogger(sink=sink)

    run_logger.log_stage_start("transcribe")
    run_logger.log_event("synthesize", "backend_selected", backend="pico2wave", chunks=3)
    run_logger.log_stage_failure("translate", "service_unavailable")

    lines = sink.getvalue().splitlines()
    assert lines == [
        "[phase] level=INFO stage=transcribe event=start",
        "[phase] level=INFO stage=synthesize event=backend_selected backend=pico2wave chunks=3",
        "[phase] level=ERROR stage=translate event=failure error_kind=service_unavailable",
    ]


def test_run_logger_hides_debug_output_unless_verbose() -> None:
    """Tool chatter at debug level only shows up in verbose mode."""

    quiet_sink = io.StringIO()
    RunLogger(sink=quiet_sink)
    logger.debug("whisper: loading model")

    verbose_sink = io.StringIO()
    RunLogger(sink=verbose_sink, verbose=True)
    logger.debug("whisper: loading model")

    assert quiet_sink.getvalue() == ""
    assert "whisper: loading model" in verbose_sink.getvalue()
