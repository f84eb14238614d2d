"""Runtime executable resolution and availability probing.

Responsibilities:
- Resolve external executable paths with deterministic bundled-first precedence.
- Probe whether optional tools, Python modules, and OS families are present.
"""

from __future__ import annotations

import importlib.util
from pathlib import Path
import platform
import shutil
import sys
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    from .process import ProcessInvoker


_PLATFORM_SYSTEMS = {
    "macos": "Darwin",
    "windows": "Windows",
    "linux": "Linux",
}


def resolve_executable(command_name: str) -> str:
    """Resolve an executable with bundled-first precedence, then PATH.

    Resolution order:
    1. Bundled app directories (`./bin/<tool>` then `./<tool>` from app root).
    2. System `PATH`.
    3. Raw command name (allowing subprocess to raise a native missing-binary error).
    """

    normalized = command_name.strip()
    if not normalized:
        return command_name

    bundled = bundled_executable(normalized)
    if bundled is not None:
        return str(bundled)

    resolved_path = shutil.which(normalized)
    if resolved_path is not None:
        return resolved_path

    return normalized


def bundled_executable(command_name: str) -> Path | None:
    """Return the first bundled executable candidate that exists on disk."""

    for candidate in _bundled_candidates(command_name):
        if candidate.is_file():
            return candidate
    return None


def current_platform_family() -> str:
    """Return the normalized OS family of the running interpreter."""

    system = platform.system()
    for family, system_name in _PLATFORM_SYSTEMS.items():
        if system == system_name:
            return family
    return system.lower()


class AvailabilityProber:
    """Answer "is this tool usable here" questions without ever raising."""

    def __init__(self, invoker: ProcessInvoker, platform_family: str | None = None) -> None:
        self._invoker = invoker
        self._platform_family = platform_family or current_platform_family()

    @property
    def platform_family(self) -> str:
        return self._platform_family

    def lookup_command(self) -> str:
        """Return the platform's locate-executable command."""

        return "where" if self._platform_family == "windows" else "which"

    def is_available(self, command_name: str) -> bool:
        """Return whether a command can be located on this machine."""

        normalized = command_name.strip()
        if not normalized:
            return False
        if bundled_executable(normalized) is not None:
            return True
        try:
            result = self._invoker.run(self.lookup_command(), [normalized])
        except Exception as exc:
            logger.debug("Availability probe for {} failed: {}", normalized, exc)
            return False
        return result.exit_code == 0

    def is_platform(self, family: str) -> bool:
        """Return whether the current OS family matches `family`."""

        return self._platform_family == family.strip().lower()

    def is_module_available(self, module_name: str) -> bool:
        """Return whether a Python module can be imported in this interpreter."""

        try:
            return importlib.util.find_spec(module_name) is not None
        except (ImportError, ValueError):
            return False


def _bundled_candidates(command_name: str) -> list[Path]:
    """Return deterministic bundled candidate paths for one executable name."""

    app_root = _app_root()
    names = _candidate_names(command_name)
    candidates: list[Path] = []
    for name in names:
        candidates.append(app_root / "bin" / name)
        candidates.append(app_root / name)
    return candidates


def _candidate_names(command_name: str) -> tuple[str, ...]:
    """Return command name variants including Windows `.exe` fallback."""

    lowered = command_name.lower()
    if lowered.endswith(".exe"):
        return (command_name,)
    return (command_name, f"{command_name}.exe")


def _app_root() -> Path:
    """Resolve runtime application root for frozen and non-frozen execution."""

    frozen = bool(getattr(sys, "frozen", False))
    if frozen:
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]
