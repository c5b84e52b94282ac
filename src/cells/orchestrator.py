# src/cells/orchestrator.py — v1
"""Validation orchestrator — one full pass over a Cell, or over a directory of Cells.

Single-Cell workflow:
    1. Load listing, manifest and pipeline (each load failure = one error)
    2. Validate manifest and pipeline independently (no short-circuit)
    3. Structural checks when both documents are schema-valid; the
       pipeline-only cross-field rules still run when only the pipeline is
    4. Merge: manifest, pipeline, then structural findings
"""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path
from typing import Any, Callable

from cellgov.cells.base_loader import BaseCellLoader, CellLoadError
from cellgov.cells.dependency_graph import build_dependency_graph, find_cycles
from cellgov.cells.directory_loader import DirectoryCellLoader
from cellgov.cells.manifest_validator import validate_manifest
from cellgov.cells.models import CellManifest, CellPipeline, ValidationResult
from cellgov.cells.pipeline_validator import validate_pipeline
from cellgov.cells.structure_checker import (
    SourceExists,
    check_pipeline_rules,
    check_structure,
)
from cellgov.config.settings import Settings, load_settings
from cellgov.logging.context import reset_cell_context, set_cell_context, set_step_context

logger = logging.getLogger(__name__)


def validate_cell(
    location: str | Path,
    loader: BaseCellLoader | None = None,
    source_exists: SourceExists | None = None,
    settings: Settings | None = None,
) -> ValidationResult:
    """Validate one Cell.

    Args:
        location: Cell location understood by the loader (a directory by default).
        loader: Document source (DirectoryCellLoader if omitted).
        source_exists: Optional remote-procedure resolver for the data contract.
        settings: Layout conventions (defaults from env).

    Returns:
        ValidationResult; identical inputs give identical results.
    """
    result, _ = _run_cell(location, loader, source_exists, settings)
    return result


def validate_all(
    root: str | Path,
    loader: BaseCellLoader | None = None,
    source_exists: SourceExists | None = None,
    settings: Settings | None = None,
) -> dict[str, ValidationResult]:
    """Validate every Cell under root and check ids and dependencies across them.

    Adds to the affected Cells' results:
    - an error for each Cell id declared by more than one Cell
    - an error for each dependency cycle the Cell takes part in

    Returns:
        Results keyed by Cell location, in sorted location order.

    Raises:
        CellLoadError: If root itself cannot be listed.
    """
    settings = settings or load_settings()
    loader = loader or DirectoryCellLoader(settings)

    results: dict[str, ValidationResult] = {}
    manifests: dict[str, CellManifest] = {}
    for location in loader.discover(root):
        result, manifest = _run_cell(location, loader, source_exists, settings)
        results[location] = result
        if manifest is not None:
            manifests[location] = manifest

    locations_by_id: dict[str, list[str]] = defaultdict(list)
    for location, manifest in manifests.items():
        locations_by_id[manifest.id].append(location)
    for cell_id, locations in locations_by_id.items():
        if len(locations) > 1:
            for location in locations:
                others = ", ".join(loc for loc in locations if loc != location)
                results[location].errors.append(
                    f"Duplicate cell id {cell_id!r} also declared at {others}"
                )

    unique = {
        loc: m for loc, m in manifests.items() if len(locations_by_id[m.id]) == 1
    }
    graph = build_dependency_graph(unique)
    for cycle in find_cycles(graph):
        message = "Dependency cycle: " + " -> ".join(cycle + [cycle[0]])
        for cell_id in cycle:
            location = graph.nodes[cell_id].get("location")
            if location is not None:
                results[location].errors.append(message)

    failed = sum(1 for r in results.values() if not r.valid)
    logger.info("Validated %d cell(s) under %s: %d failed", len(results), root, failed)
    return results


def collect_manifests(
    root: str | Path,
    loader: BaseCellLoader | None = None,
    settings: Settings | None = None,
) -> dict[str, CellManifest]:
    """Load the schema-valid manifests of all Cells under root."""
    settings = settings or load_settings()
    loader = loader or DirectoryCellLoader(settings)
    manifests: dict[str, CellManifest] = {}
    for location in loader.discover(root):
        doc, errors = _load(loader.load_manifest, location)
        if errors or validate_manifest(doc).errors:
            logger.debug("Skipping invalid manifest at %s", location)
            continue
        manifests[location] = CellManifest.model_validate(doc)
    return manifests


def _run_cell(
    location: str | Path,
    loader: BaseCellLoader | None,
    source_exists: SourceExists | None,
    settings: Settings | None,
) -> tuple[ValidationResult, CellManifest | None]:
    settings = settings or load_settings()
    loader = loader or DirectoryCellLoader(settings)
    cell_path = str(location)
    token = set_cell_context(cell_path)
    try:
        try:
            layout = loader.list_files(location)
        except CellLoadError as e:
            logger.warning("Cannot list cell: %s", e)
            return ValidationResult(errors=[str(e)], cell_path=cell_path), None

        set_step_context("manifest")
        manifest_doc, manifest_errors = _load(loader.load_manifest, location)
        if not manifest_errors:
            manifest_errors = validate_manifest(manifest_doc).errors

        set_step_context("pipeline")
        pipeline_doc, pipeline_errors = _load(loader.load_pipeline, location)
        if not pipeline_errors:
            pipeline_errors = validate_pipeline(pipeline_doc).errors

        manifest = None if manifest_errors else CellManifest.model_validate(manifest_doc)
        pipeline = None if pipeline_errors else CellPipeline.model_validate(pipeline_doc)

        set_step_context("structure")
        structure_errors: list[str] = []
        warnings: list[str] = []
        if manifest is not None and pipeline is not None:
            report = check_structure(manifest, pipeline, layout, source_exists, settings)
            structure_errors, warnings = report.errors, report.warnings
        elif pipeline is not None:
            structure_errors = check_pipeline_rules(pipeline)

        result = ValidationResult(
            errors=[*manifest_errors, *pipeline_errors, *structure_errors],
            warnings=warnings,
            cell_path=cell_path,
        )
        logger.info(
            "Cell %s: %s (%d error(s), %d warning(s))",
            cell_path,
            "valid" if result.valid else "invalid",
            len(result.errors),
            len(result.warnings),
        )
        return result, manifest
    finally:
        set_step_context(None)
        reset_cell_context(token)


def _load(fn: Callable[[str | Path], Any], location: str | Path) -> tuple[Any, list[str]]:
    """Call a loader method, turning CellLoadError into a single error string."""
    try:
        doc = fn(location)
    except CellLoadError as e:
        logger.warning("Load failed (%s): %s", e.kind, e)
        return None, [str(e)]
    return doc, []
