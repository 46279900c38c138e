"""Error taxonomy for the resolution workflow.

``IncompleteResolution`` and stale selections are intentionally absent: the first
is an advisory flag on :class:`trailpack.domain.manifest.ManifestBuild`, the second
is dropped silently when a selection is resolved against the master set.
"""

from __future__ import annotations


class TrailpackError(RuntimeError):
    """Base class for errors surfaced to callers for display."""


class IngestionFailure(TrailpackError):
    """Raised when the change-log collaborator cannot deliver entries."""


class ResolverFailure(TrailpackError):
    """Raised when a resolver call fails mid-pipeline.

    Merges committed by earlier phases are kept.
    """

    def __init__(self, message: str, *, phase: str) -> None:
        super().__init__(message)
        self.phase = phase


class PipelineBusyError(TrailpackError):
    """Raised when a resolve is requested while another run is in flight."""


class UnknownRecordError(TrailpackError):
    """Raised when an edit targets an id that is not in the master set."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"Unknown record id: {record_id}")
        self.record_id = record_id


class DuplicateRecordError(ValueError):
    """Raised when a master set would contain two records with the same id."""

    def __init__(self, record_id: str) -> None:
        super().__init__(f"Duplicate record id: {record_id}")
        self.record_id = record_id
