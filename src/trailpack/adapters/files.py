"""File-backed adapters: JSON change logs, catalog snapshots and manifest sinks."""

from __future__ import annotations

import json
import sys
from dataclasses import dataclass
from datetime import datetime
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Any, TextIO

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from trailpack.domain.catalog import CatalogEntry
from trailpack.domain.errors import IngestionFailure

if TYPE_CHECKING:
    from collections.abc import Mapping

log = getLogger(__name__)

_RawEntries = TypeAdapter(list[dict[str, Any]])


class CatalogEntryRow(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    metadata_type: str = Field(alias="metadataType", min_length=1)
    full_name: str = Field(alias="fullName", min_length=1)
    created_date: datetime = Field(alias="createdDate")
    last_modified_date: datetime = Field(alias="lastModifiedDate")


_CatalogRows = TypeAdapter(list[CatalogEntryRow])


def _read_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise IngestionFailure(f"Cannot read {path}: {exc}") from exc
    except ValueError as exc:
        raise IngestionFailure(f"{path} is not valid JSON: {exc}") from exc


def _unwrap(payload: Any, key: str) -> Any:
    # Accept either a bare list or an object wrapping it (``{"records": [...]}``).
    if isinstance(payload, dict) and key in payload:
        return payload[key]
    return payload


@dataclass(slots=True)
class JsonChangeLogSource:
    """Read change-log entries from a JSON export.

    The file holds a list of entry objects, optionally wrapped as
    ``{"records": [...]}``. Keys may be camelCase or snake_case.
    """

    path: Path

    async def __call__(self) -> list[Mapping[str, Any]]:
        payload = _unwrap(_read_json(self.path), "records")
        try:
            entries = _RawEntries.validate_python(payload)
        except ValidationError as exc:
            raise IngestionFailure(f"{self.path} does not contain a list of entries") from exc
        log.info("Read %s change-log entries from %s", len(entries), self.path)
        return entries


def load_catalog_entries(path: Path) -> list[CatalogEntry]:
    """Parse a catalog snapshot file into :class:`CatalogEntry` values."""

    payload = _unwrap(_read_json(path), "entries")
    try:
        rows = _CatalogRows.validate_python(payload)
    except ValidationError as exc:
        raise IngestionFailure(f"{path} is not a valid catalog snapshot: {exc}") from exc
    return [
        CatalogEntry(
            metadata_type=row.metadata_type,
            full_name=row.full_name,
            created_date=row.created_date,
            last_modified_date=row.last_modified_date,
        )
        for row in rows
    ]


@dataclass(slots=True)
class FileExportSink:
    path: Path

    def __call__(self, manifest_text: str) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(manifest_text + "\n", encoding="utf-8")
        log.info("Wrote manifest to %s", self.path)


@dataclass(slots=True)
class StreamExportSink:
    stream: TextIO | None = None

    def __call__(self, manifest_text: str) -> None:
        stream = self.stream or sys.stdout
        stream.write(manifest_text + "\n")
        stream.flush()
