"""Shared pytest fixtures for the full podtranslate test suite."""

from __future__ import annotations

from collections.abc import Iterator
import sys

import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def _reset_loguru_sinks() -> Iterator[None]:
    """Restore a single stderr sink so run loggers never leak between tests."""

    yield
    logger.remove()
    logger.add(sys.stderr, level="WARNING")
