"""Application orchestration entry points."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from datetime import timedelta
from enum import StrEnum
from logging import getLogger
from typing import TYPE_CHECKING

from trailpack.adapters.files import JsonChangeLogSource, load_catalog_entries
from trailpack.adapters.inference import InferenceResolver
from trailpack.adapters.salesforce import SalesforceClient, SetupAuditTrailSource, ToolingResolver
from trailpack.adapters.sqlalchemy import CatalogResolver, CatalogUnitOfWork, is_started, startup
from trailpack.config import get_inference_config, get_resolution_config, get_salesforce_config
from trailpack.domain.errors import IngestionFailure
from trailpack.domain.manifest import build_manifest
from trailpack.domain.resolution import ResolutionPipeline
from trailpack.domain.time_windows import TimeWindow
from trailpack.domain.workspace import Workspace

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from trailpack.config import ResolutionConfig
    from trailpack.domain.manifest import ManifestBuild
    from trailpack.domain.model import Record
    from trailpack.domain.ports import (
        ChangeLogSource,
        DeterministicResolver,
        ExportSink,
        GenerativeResolver,
    )
    from trailpack.domain.resolution import NoticeHandler, ResolutionOutcome

UnitOfWorkFactory = Callable[[], CatalogUnitOfWork]

log = getLogger(__name__)


class ResolverKind(StrEnum):
    TOOLING = "tooling"
    CATALOG = "catalog"
    NONE = "none"


async def no_exact_matches(records: Sequence[Record]) -> list[Record]:
    """Deterministic resolver that never matches; every record falls through."""

    log.info("Exact lookup disabled; %s record(s) left for inference", len(records))
    return []


async def ingest(source: ChangeLogSource) -> Workspace:
    """Load one session's entries into a fresh workspace."""

    try:
        entries = await source()
        workspace = Workspace.from_entries(entries)
    except IngestionFailure:
        raise
    except Exception as exc:
        raise IngestionFailure(f"Could not load change-log entries: {exc}") from exc
    log.info("Loaded %s change-log record(s)", len(workspace.master))
    return workspace


def load_workspace(source: ChangeLogSource) -> Workspace:
    return asyncio.run(ingest(source))


def build_change_log_source(
    *,
    input_path: Path | None = None,
    lookback_days: int | None = None,
    limit: int | None = None,
    config: ResolutionConfig | None = None,
) -> ChangeLogSource:
    """Return a JSON file source when ``input_path`` is given, else the org's audit trail."""

    if input_path is not None:
        return JsonChangeLogSource(input_path)

    effective_config = config or get_resolution_config()
    days = effective_config.audit_lookback_days if lookback_days is None else lookback_days
    if days < 0:
        raise ValueError("Lookback days must be non-negative")
    return SetupAuditTrailSource(
        client=SalesforceClient(config=get_salesforce_config()),
        window=TimeWindow(lookback=timedelta(days=days)),
        limit=effective_config.audit_row_limit if limit is None else limit,
    )


def build_deterministic_resolver(
    kind: ResolverKind | str,
    *,
    config: ResolutionConfig | None = None,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> DeterministicResolver:
    effective_config = config or get_resolution_config()
    resolver_kind = ResolverKind(kind)
    if resolver_kind is ResolverKind.TOOLING:
        return ToolingResolver(
            client=SalesforceClient(config=get_salesforce_config()),
            tolerance=effective_config.match_tolerance,
        )
    if resolver_kind is ResolverKind.CATALOG:
        if not is_started():
            startup()
        return CatalogResolver(
            unit_of_work_factory=unit_of_work_factory or CatalogUnitOfWork,
            tolerance=effective_config.match_tolerance,
        )
    return no_exact_matches


def build_generative_resolver(*, enabled: bool = True) -> GenerativeResolver | None:
    if not enabled:
        return None
    return InferenceResolver(config=get_inference_config())


def resolve_selection(
    workspace: Workspace,
    *,
    deterministic: DeterministicResolver,
    generative: GenerativeResolver | None = None,
    notify: NoticeHandler | None = None,
) -> ResolutionOutcome:
    """Run both resolution phases for the workspace's current selection."""

    pipeline = ResolutionPipeline(
        deterministic=deterministic,
        generative=generative,
        notify=notify,
    )
    outcome = asyncio.run(pipeline.run(workspace))
    log.info(
        "Finished resolution: status=%s, requested=%s, exact=%s, inferred=%s, unresolved=%s",
        outcome.status,
        outcome.requested,
        outcome.resolved_deterministic,
        outcome.resolved_generative,
        len(outcome.unresolved_ids),
    )
    return outcome


def generate_manifest(
    workspace: Workspace,
    *,
    sink: ExportSink | None = None,
    api_version: str | None = None,
) -> ManifestBuild:
    """Build the manifest for the current selection and hand it to ``sink``."""

    version = api_version or get_resolution_config().manifest_api_version
    result = build_manifest(workspace.master, workspace.selection.selected, api_version=version)
    if sink is not None:
        sink(result.text)
    log.info(
        "Generated manifest: types=%s, selected=%s, incomplete=%s",
        len(result.manifest.types),
        len(workspace.selection),
        result.incomplete,
    )
    return result


def import_catalog(
    path: Path,
    *,
    unit_of_work_factory: UnitOfWorkFactory | None = None,
) -> int:
    """Load a JSON catalog snapshot into the local catalog database."""

    entries = load_catalog_entries(path)
    if unit_of_work_factory is None:
        if not is_started():
            startup()
        unit_of_work_factory = CatalogUnitOfWork

    with unit_of_work_factory() as uow:
        written = uow.catalog.add_many(entries)
        uow.commit()
        total = uow.catalog.count()
    log.info("Imported %s catalog entries from %s (catalog now holds %s)", written, path, total)
    return written

