"""Synthesis backend selection.

Responsibilities:
- Walk backends in fixed preference order and pick the first usable one.
- Report per-backend availability for diagnostics.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from ..errors import ErrorKind, PipelineStageError
from ..runtime_tools import AvailabilityProber
from .backends import SynthesisBackend


@dataclass(frozen=True, slots=True)
class BackendAvailability:
    """Probe result for one backend.

    Attributes:
        name: Backend name.
        platform_family: Required OS family, or `None` when portable.
        platform_ok: Whether the platform constraint holds.
        available: Whether the backend would be usable.
    """

    name: str
    platform_family: str | None
    platform_ok: bool
    available: bool


class EngineSelector:
    """Choose a synthesis backend; holds no state between jobs."""

    def __init__(self, backends: Sequence[SynthesisBackend], prober: AvailabilityProber) -> None:
        self.backends = tuple(backends)
        self.prober = prober

    def select(self) -> SynthesisBackend:
        """Return the first usable backend in preference order.

        Raises:
            PipelineStageError: `unavailable` when no backend is usable.
        """

        attempted: list[str] = []
        for backend in self.backends:
            attempted.append(backend.name)
            if self._is_usable(backend):
                logger.debug("Selected synthesis backend {}", backend.name)
                return backend
            logger.debug("Synthesis backend {} is not available", backend.name)

        tried = ", ".join(attempted) if attempted else "none configured"
        raise PipelineStageError(
            stage="synthesize",
            kind=ErrorKind.UNAVAILABLE,
            detail=f"No supported speech synthesis backend found (tried: {tried}).",
            hint="Install espeak or pico2wave, or `pip install pyttsx3`.",
        )

    def report(self) -> list[BackendAvailability]:
        """Probe every backend and return availability in preference order."""

        rows: list[BackendAvailability] = []
        for backend in self.backends:
            platform_ok = self._platform_ok(backend)
            rows.append(
                BackendAvailability(
                    name=backend.name,
                    platform_family=backend.platform_family,
                    platform_ok=platform_ok,
                    available=platform_ok and backend.probe(self.prober),
                )
            )
        return rows

    def _is_usable(self, backend: SynthesisBackend) -> bool:
        return self._platform_ok(backend) and backend.probe(self.prober)

    def _platform_ok(self, backend: SynthesisBackend) -> bool:
        if backend.platform_family is None:
            return True
        return self.prober.is_platform(backend.platform_family)
