"""Blocking invocation of external command-line tools.

Every stage that talks to a native tool (ffmpeg, whisper.cpp, espeak,
pico2wave, say) goes through `ProcessInvoker`. Interpreting the exit code is
left to the calling adapter.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import subprocess

from loguru import logger

from .errors import ProcessSpawnError
from .runtime_tools import resolve_executable


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Outcome of one finished external process.

    Attributes:
        command: Executable and arguments exactly as launched.
        output: Combined stdout/stderr text.
        exit_code: Process exit status.
    """

    command: tuple[str, ...]
    output: str
    exit_code: int

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0

    def output_tail(self, max_chars: int = 300) -> str:
        """Return the last part of the tool output for compact diagnostics."""

        compact = self.output.strip()
        if len(compact) <= max_chars:
            return compact
        return f"...{compact[-max_chars:]}"


class ProcessInvoker:
    """Run one external command at a time and wait for it to finish."""

    def run(self, command_name: str, arguments: Sequence[str]) -> CommandResult:
        """Spawn `command_name` with discrete arguments and capture merged output.

        Raises:
            ProcessSpawnError: If the executable is missing or cannot be launched.
        """

        executable = resolve_executable(command_name)
        command = (executable, *(str(argument) for argument in arguments))
        logger.debug("Running {}", " ".join(command))
        try:
            completed = subprocess.run(
                command,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as exc:
            raise ProcessSpawnError(command_name, "executable not found") from exc
        except PermissionError as exc:
            raise ProcessSpawnError(command_name, "permission denied") from exc
        except OSError as exc:
            raise ProcessSpawnError(command_name, str(exc)) from exc

        return CommandResult(
            command=command,
            output=completed.stdout or "",
            exit_code=completed.returncode,
        )
