"""Build deduplicated, canonically ordered ``package.xml`` manifests."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING
from xml.sax.saxutils import escape

from trailpack.domain.model import UNKNOWN_METADATA_TYPE, MetadataType

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from trailpack.domain.model import MasterSet, Record

log = getLogger(__name__)

FALLBACK_TYPE = MetadataType.CUSTOM_METADATA.value
PLACEHOLDER_MEMBER = "Unknown_Member"
DEFAULT_API_VERSION = "60.0"
MISSING_API_NAMES_WARNING = "Some selected items are missing API names."

_XML_HEADER = '<?xml version="1.0" encoding="UTF-8"?>'
_PACKAGE_OPEN = '<Package xmlns="http://soap.sforce.com/2006/04/metadata">'
_PACKAGE_CLOSE = "</Package>"
_INDENT = "    "


@dataclass(frozen=True, slots=True)
class Manifest:
    """Mapping of metadata type to member names."""

    types: Mapping[str, frozenset[str]] = field(default_factory=dict)
    api_version: str = DEFAULT_API_VERSION

    def sorted_types(self) -> list[tuple[str, list[str]]]:
        return [(name, sorted(self.types[name])) for name in sorted(self.types)]

    def render(self) -> str:
        lines = [_XML_HEADER, _PACKAGE_OPEN]
        for type_name, members in self.sorted_types():
            lines.append(f"{_INDENT}<types>")
            lines.extend(
                f"{_INDENT * 2}<members>{escape(member)}</members>" for member in members
            )
            lines.append(f"{_INDENT * 2}<name>{escape(type_name)}</name>")
            lines.append(f"{_INDENT}</types>")
        lines.append(f"{_INDENT}<version>{escape(self.api_version)}</version>")
        lines.append(_PACKAGE_CLOSE)
        return "\n".join(lines)


@dataclass(frozen=True, slots=True)
class ManifestBuild:
    """Manifest plus the advisory completeness flag."""

    manifest: Manifest
    text: str
    unresolved_ids: tuple[str, ...] = ()

    @property
    def incomplete(self) -> bool:
        return bool(self.unresolved_ids)

    @property
    def warning(self) -> str | None:
        return MISSING_API_NAMES_WARNING if self.incomplete else None


def manifest_type(record: Record) -> str:
    if record.metadata_type and record.metadata_type != UNKNOWN_METADATA_TYPE:
        return record.metadata_type
    return FALLBACK_TYPE


def manifest_member(record: Record) -> str:
    return record.api_name if record.api_name is not None else PLACEHOLDER_MEMBER


def build_manifest(
    master: MasterSet,
    selection: Iterable[str],
    *,
    api_version: str = DEFAULT_API_VERSION,
) -> ManifestBuild:
    """Group the selected records by type and render the manifest.

    Selected ids missing from ``master`` are ignored. Records without an api name
    are emitted as ``Unknown_Member`` and reported via ``unresolved_ids``.
    """

    records = master.select(selection)
    grouped: dict[str, set[str]] = {}
    unresolved: list[str] = []
    for record in records:
        if not record.is_resolved:
            unresolved.append(record.id)
        grouped.setdefault(manifest_type(record), set()).add(manifest_member(record))

    manifest = Manifest(
        types={name: frozenset(members) for name, members in grouped.items()},
        api_version=api_version,
    )
    if unresolved:
        log.warning("%s (%s record(s))", MISSING_API_NAMES_WARNING, len(unresolved))
    return ManifestBuild(
        manifest=manifest,
        text=manifest.render(),
        unresolved_ids=tuple(unresolved),
    )
