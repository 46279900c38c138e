from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from trailpack.app import (
    ResolverKind,
    build_change_log_source,
    build_deterministic_resolver,
    build_generative_resolver,
    generate_manifest,
    import_catalog,
    load_workspace,
    resolve_selection,
)
from trailpack.adapters.files import FileExportSink, StreamExportSink
from trailpack.config import configure_logging
from trailpack.domain.model import RecordFilter, derive_hints
from trailpack.domain.resolution import NoticeLevel

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from trailpack.domain.resolution import Notice
    from trailpack.domain.workspace import Workspace

log = logging.getLogger(__name__)

_NOTICE_LOG_LEVELS = {
    NoticeLevel.INFO: logging.INFO,
    NoticeLevel.SUCCESS: logging.INFO,
    NoticeLevel.WARNING: logging.WARNING,
    NoticeLevel.ERROR: logging.ERROR,
}


def _parse_filter(value: str) -> RecordFilter:
    for option in RecordFilter:
        if option.value.casefold() == value.strip().casefold():
            return option
    raise argparse.ArgumentTypeError(
        f"Invalid filter {value!r}; choose from {', '.join(RecordFilter)}"
    )


def _parse_edit(value: str) -> tuple[str, str | None]:
    record_id, sep, api_name = value.partition("=")
    if not sep or not record_id.strip():
        raise argparse.ArgumentTypeError(f"Invalid edit {value!r}; expected ID=API_NAME")
    return record_id.strip(), api_name.strip() or None


def _add_source_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--input",
        type=Path,
        help="Read change-log entries from a JSON file instead of the org's Setup Audit Trail",
    )
    parser.add_argument(
        "--lookback-days",
        type=int,
        help="Audit trail lookback in days (defaults to config)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Maximum number of audit trail rows to fetch (defaults to config)",
    )
    parser.add_argument(
        "--filter",
        type=_parse_filter,
        default=RecordFilter.ALL,
        help="Show only All, Created or Updated changes (default: %(default)s)",
    )


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build package.xml manifests from setup changes")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    changes = subparsers.add_parser("changes", help="List change-log entries")
    _add_source_arguments(changes)

    generate = subparsers.add_parser("generate", help="Resolve selected changes into a manifest")
    _add_source_arguments(generate)
    generate.add_argument(
        "--select",
        nargs="+",
        metavar="ID",
        help="Record ids to include (default: every record in the filtered view)",
    )
    generate.add_argument(
        "--set",
        dest="edits",
        type=_parse_edit,
        action="append",
        default=[],
        metavar="ID=API_NAME",
        help="Manually set a record's api name before resolving (repeatable)",
    )
    generate.add_argument(
        "--resolver",
        type=ResolverKind,
        choices=list(ResolverKind),
        default=ResolverKind.TOOLING,
        help="Exact lookup backend (default: %(default)s)",
    )
    generate.add_argument(
        "--no-inference",
        action="store_true",
        help="Skip the generative fallback for records without an exact match",
    )
    generate.add_argument(
        "--skip-resolve",
        action="store_true",
        help="Build the manifest from the records as loaded",
    )
    generate.add_argument(
        "--api-version",
        type=str,
        help="Manifest API version (defaults to config)",
    )
    generate.add_argument(
        "--output",
        type=Path,
        help="Write the manifest to this file instead of stdout",
    )

    catalog = subparsers.add_parser(
        "catalog-import",
        help="Load a JSON metadata catalog snapshot into the local database",
    )
    catalog.add_argument("path", type=Path, help="Path to the catalog JSON file")

    return parser.parse_args(list(argv))


def _log_notice(notice: Notice) -> None:
    log.log(_NOTICE_LOG_LEVELS[notice.level], "%s: %s", notice.title, notice.message)


def _load(args: argparse.Namespace) -> Workspace:
    source = build_change_log_source(
        input_path=args.input,
        lookback_days=args.lookback_days,
        limit=args.limit,
    )
    workspace = load_workspace(source)
    workspace.on_filter_change(args.filter)
    return workspace


def _print_changes(workspace: Workspace) -> None:
    for record in workspace.view.records:
        hints = derive_hints(record)
        api_name = record.api_name or hints.resolution_label
        print(  # noqa: T201
            f"{record.id}\t{record.created_date:%Y-%m-%d %H:%M}\t{record.action_type}\t"
            f"{record.metadata_type}\t{record.section}\t{record.display}\t{api_name}"
        )


def _generate(args: argparse.Namespace) -> None:
    workspace = _load(args)
    if args.select:
        workspace.selection.select(args.select)
    else:
        workspace.select_visible()
    log.info(workspace.selected_count_label)

    if args.edits:
        for record_id, api_name in args.edits:
            workspace.apply_edit(record_id, api_name)

    if workspace.is_generate_disabled:
        raise ValueError("Nothing selected; no manifest generated")

    if not args.skip_resolve:
        resolve_selection(
            workspace,
            deterministic=build_deterministic_resolver(args.resolver),
            generative=build_generative_resolver(enabled=not args.no_inference),
            notify=_log_notice,
        )

    sink = FileExportSink(args.output) if args.output else StreamExportSink()
    result = generate_manifest(workspace, sink=sink, api_version=args.api_version)
    if result.warning:
        log.warning("%s Unresolved ids: %s", result.warning, ", ".join(result.unresolved_ids))


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "changes":
            _print_changes(_load(parsed_args))
        elif parsed_args.command == "generate":
            _generate(parsed_args)
        elif parsed_args.command == "catalog-import":
            written = import_catalog(parsed_args.path)
            log.info("Catalog import finished: entries=%s", written)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error")
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
