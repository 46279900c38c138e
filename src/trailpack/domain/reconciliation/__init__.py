"""Merge engine folding partial resolver results into the master set."""

from __future__ import annotations

from .keys import CorrelationStrategy, DescriptionKeyStrategy, composite_key
from .merge import MergePolicy, RecordPatch, merge

__all__ = [
    "CorrelationStrategy",
    "DescriptionKeyStrategy",
    "MergePolicy",
    "RecordPatch",
    "composite_key",
    "merge",
]
