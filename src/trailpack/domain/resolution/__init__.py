"""Two-phase resolution of api names for selected records."""

from __future__ import annotations

from .notices import Notice, NoticeHandler, NoticeLevel
from .pipeline import (
    PipelineState,
    ResolutionOutcome,
    ResolutionPipeline,
    ResolutionStatus,
)

__all__ = [
    "Notice",
    "NoticeHandler",
    "NoticeLevel",
    "PipelineState",
    "ResolutionOutcome",
    "ResolutionPipeline",
    "ResolutionStatus",
]
