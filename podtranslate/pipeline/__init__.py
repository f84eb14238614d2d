"""Pipeline orchestration package.

This package contains the stage sequencing facade and its telemetry helpers.
"""

from .orchestrator import MediaTranslationPipeline

__all__ = ["MediaTranslationPipeline"]
