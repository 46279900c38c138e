"""Domain port definitions for adapters."""

from __future__ import annotations

from .catalog import CatalogRepository
from .export import ExportSink
from .ingestion import ChangeLogSource, RawEntry
from .resolution import DeterministicResolver, GenerativeResolver

__all__ = [
    "CatalogRepository",
    "ChangeLogSource",
    "DeterministicResolver",
    "ExportSink",
    "GenerativeResolver",
    "RawEntry",
]
