"""Filesystem and media input helpers."""

from .artifacts import ArtifactManager, TempArtifactScope
from .media import MediaExtractor

__all__ = ["ArtifactManager", "TempArtifactScope", "MediaExtractor"]
