"""Scoped temporary artifact management.

Responsibilities:
- Hand out job-unique scratch paths for prompts, transcripts, and audio chunks.
- Delete every scratch path when the owning stage exits, on success or failure.
"""

from __future__ import annotations

from pathlib import Path
from types import TracebackType

from loguru import logger


class TempArtifactScope:
    """Track scratch paths acquired by one stage and release them together."""

    def __init__(self, work_dir: Path, prefix: str) -> None:
        """Initialize the scope with a scratch directory and file name prefix."""

        self.work_dir = work_dir
        self.prefix = prefix
        self._paths: list[Path] = []
        self._released = False

    @property
    def paths(self) -> tuple[Path, ...]:
        """Return acquired paths in acquisition order."""

        return tuple(self._paths)

    def acquire(self, name: str) -> Path:
        """Register and return a scratch path; the file itself is not created."""

        if self._released:
            raise RuntimeError(f"Artifact scope `{self.prefix}` was already released.")
        self.work_dir.mkdir(parents=True, exist_ok=True)
        path = self.work_dir / f"{self.prefix}-{name}"
        if path not in self._paths:
            self._paths.append(path)
        return path

    def write_text(self, name: str, content: str) -> Path:
        """Acquire a scratch path and write UTF-8 text to it."""

        path = self.acquire(name)
        path.write_text(content, encoding="utf-8")
        return path

    def release(self) -> None:
        """Delete every acquired path; missing files are ignored."""

        for path in reversed(self._paths):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                logger.warning("Could not delete temp artifact {}: {}", path, exc)
        self._paths.clear()
        self._released = True

    def __enter__(self) -> TempArtifactScope:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.release()


class ArtifactManager:
    """Create stage-owned artifact scopes below one scratch directory."""

    def __init__(self, work_dir: Path, job_token: str) -> None:
        """Initialize the manager for one job."""

        self.work_dir = work_dir
        self.job_token = job_token

    def scope(self, stage: str) -> TempArtifactScope:
        """Return a new scope whose paths are prefixed with the job token and stage."""

        return TempArtifactScope(self.work_dir, f"{self.job_token}-{stage}")
