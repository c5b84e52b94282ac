# src/main.py — v1
"""CLI entry point — validate, validate-all, impact, ledger commands.

Usage:
    cellgov validate [--json] <cell-path>
    cellgov validate-all [--json] <root>
    cellgov impact <root> <cell-id>
    cellgov ledger {find,history,dependents,recent,story,schema-changes} ...

Exit status: 0 when every validated Cell passes, 1 otherwise.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from cellgov.version import __version__

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        _setup_logging(args.verbose)
        return args.func(args)
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130
    except Exception as exc:
        logger.error("Fatal error: %s", exc, exc_info=args.verbose)
        return 1


def _build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="cellgov",
        description=f"cellgov v{__version__} - Cell validation and iteration ledger",
    )
    parser.add_argument(
        "--version", action="version", version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(dest="command")

    # --- validate ---
    p_validate = subparsers.add_parser("validate", help="Validate a Component Cell")
    p_validate.add_argument("cell_path", type=Path, help="Path to the Cell directory")
    p_validate.add_argument(
        "--json", action="store_true", dest="as_json",
        help="Print the result as JSON instead of a report",
    )
    p_validate.set_defaults(func=_cmd_validate)

    # --- validate-all ---
    p_all = subparsers.add_parser("validate-all", help="Validate all Cells under a directory")
    p_all.add_argument("root", type=Path, help="Directory containing Cell directories")
    p_all.add_argument(
        "--json", action="store_true", dest="as_json",
        help="Print all results as a JSON list",
    )
    p_all.set_defaults(func=_cmd_validate_all)

    # --- impact ---
    p_impact = subparsers.add_parser(
        "impact", help="List Cells depending on a Cell or library",
    )
    p_impact.add_argument("root", type=Path, help="Directory containing Cell directories")
    p_impact.add_argument("target", help="Cell id or external dependency")
    p_impact.set_defaults(func=_cmd_impact)

    # --- ledger ---
    p_ledger = subparsers.add_parser("ledger", help="Query the iteration ledger")
    p_ledger.add_argument(
        "--ledger", type=Path, default=None,
        help="Path to ledger.jsonl (default: CELLGOV_LEDGER_PATH)",
    )
    ledger_sub = p_ledger.add_subparsers(dest="ledger_command", required=True)

    p_find = ledger_sub.add_parser("find", help="Search artifacts, prompts and notes")
    p_find.add_argument("term")
    p_history = ledger_sub.add_parser("history", help="History of an artifact id")
    p_history.add_argument("artifact_id")
    p_dependents = ledger_sub.add_parser("dependents", help="Entries mentioning an API id")
    p_dependents.add_argument("api_id")
    p_recent = ledger_sub.add_parser("recent", help="Entries since an ISO date")
    p_recent.add_argument("since", type=datetime.fromisoformat)
    p_story = ledger_sub.add_parser("story", help="Entries for a story id")
    p_story.add_argument("story_id")
    ledger_sub.add_parser("schema-changes", help="Entries with schema changes")
    p_ledger.set_defaults(func=_cmd_ledger)

    return parser


def _cmd_validate(args: argparse.Namespace) -> int:
    """Validate one Cell and print its report."""
    from cellgov.cells.orchestrator import validate_cell

    cell_path: Path = args.cell_path.resolve()
    if args.as_json:
        result = validate_cell(cell_path)
        print(json.dumps(result.as_dict(), indent=2))
        return 0 if result.valid else 1

    print(f"\nValidating Cell: {args.cell_path}\n")
    result = validate_cell(cell_path)
    _print_validation_result(result)
    return 0 if result.valid else 1


def _cmd_validate_all(args: argparse.Namespace) -> int:
    """Validate every Cell under a root directory."""
    from cellgov.cells.orchestrator import validate_all

    results = validate_all(args.root.resolve())
    if args.as_json:
        print(json.dumps([r.as_dict() for r in results.values()], indent=2))
        return 0 if all(r.valid for r in results.values()) else 1

    if not results:
        print(f"\nNo Cells found under {args.root}")
        return 0

    for location, result in results.items():
        print(f"\n{'PASS' if result.valid else 'FAIL'}  {location}")
        _print_findings(result.errors, result.warnings)

    failed = sum(1 for r in results.values() if not r.valid)
    print(f"\n{len(results) - failed}/{len(results)} Cell(s) passed")
    return 0 if failed == 0 else 1


def _cmd_impact(args: argparse.Namespace) -> int:
    """Print Cells that depend on a target, directly or transitively."""
    from cellgov.cells.dependency_graph import build_dependency_graph, impacted_cells
    from cellgov.cells.orchestrator import collect_manifests

    graph = build_dependency_graph(collect_manifests(args.root.resolve()))
    impacted = impacted_cells(graph, args.target)
    if not impacted:
        print(f"No Cells depend on {args.target}")
        return 0
    print(f"Cells depending on {args.target}:")
    for cell_id in impacted:
        print(f"  • {cell_id}")
    return 0


def _cmd_ledger(args: argparse.Namespace) -> int:
    """Run a ledger query and print matching entries."""
    from cellgov.config.settings import load_settings
    from cellgov.ledger import queries
    from cellgov.ledger.backend_factory import create_backend
    from cellgov.ledger.jsonl_backend import JsonlLedgerBackend
    from cellgov.ledger.store import LedgerStore

    backend = JsonlLedgerBackend(args.ledger) if args.ledger else create_backend(load_settings())
    store = LedgerStore(backend)

    command = args.ledger_command
    if command == "find":
        entries = queries.find_artifact(store, args.term)
    elif command == "history":
        entries = queries.get_history(store, args.artifact_id)
    elif command == "dependents":
        entries = queries.find_dependents(store, args.api_id)
    elif command == "recent":
        entries = queries.get_recent_changes(store, args.since)
    elif command == "story":
        entries = queries.get_entries_by_story(store, args.story_id)
    else:
        entries = queries.get_all_schema_changes(store)

    if not entries:
        print("No matching entries")
        return 0
    for entry in entries:
        print(f"{entry.iteration_id}  {entry.timestamp.isoformat()}  {entry.human_prompt}")
    return 0


def _print_validation_result(result: object) -> None:
    """Print errors, then warnings, then the pass/fail summary."""
    _print_findings(result.errors, result.warnings)
    if result.valid:
        print("Cell validation passed!\n")
    else:
        print(f"Cell validation failed with {len(result.errors)} error(s)\n")


def _print_findings(errors: list[str], warnings: list[str]) -> None:
    if errors:
        print("Errors:\n")
        for error in errors:
            print(f"  • {error}")
        print("")
    if warnings:
        print("Warnings:\n")
        for warning in warnings:
            print(f"  • {warning}")
        print("")


def _setup_logging(verbose: bool) -> None:
    """Configure logging for CLI usage from settings."""
    from cellgov.config.settings import load_settings
    from cellgov.logging.logger import setup_logging

    settings = load_settings()
    setup_logging(
        level="DEBUG" if verbose else settings.log_level,
        log_format=settings.log_format,
        log_file=str(settings.log_file) if settings.log_file else None,
        rotation=settings.log_rotation,
        retention=settings.log_retention,
    )


if __name__ == "__main__":
    sys.exit(main())
