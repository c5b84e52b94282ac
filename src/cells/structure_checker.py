# src/cells/structure_checker.py — v1
"""Cross-document and layout checks for a Cell.

Runs on typed documents that already passed their schemas. Validates:
- Coverage floor only with unit tests enabled (error)
- Required files present in the unit layout (error)
- Assertion test files present (warning)
- Data contract source shape and, when a resolver is supplied, existence (warning)
- Disabled gates, lax success criteria, missing optional files (warning)
"""

from __future__ import annotations

import logging
from typing import Callable

from cellgov.cells.models import CellManifest, CellPipeline, StructureReport, UnitLayout
from cellgov.config.settings import Settings, load_settings

logger = logging.getLogger(__name__)

SourceExists = Callable[[str], bool]

COVERAGE_REQUIRES_TESTS = "coverage threshold requires unit tests enabled"


def check_pipeline_rules(pipeline: CellPipeline) -> list[str]:
    """Cross-field rules that depend on the pipeline alone."""
    errors: list[str] = []
    if (
        pipeline.success_criteria.min_coverage is not None
        and not pipeline.gates.unit_tests.enabled
    ):
        errors.append(COVERAGE_REQUIRES_TESTS)
    return errors


def check_structure(
    manifest: CellManifest,
    pipeline: CellPipeline,
    layout: UnitLayout,
    source_exists: SourceExists | None = None,
    settings: Settings | None = None,
) -> StructureReport:
    """Check cross-document and cross-file invariants of one Cell.

    With default settings ``component.tsx`` and ``state.ts`` are required
    files, so a Cell whose layout lacks them is invalid even when both
    documents are.

    Args:
        manifest: Schema-valid manifest.
        pipeline: Schema-valid pipeline.
        layout: Files belonging to the Cell.
        source_exists: Optional resolver telling whether a remote procedure
            exists. Without it the existence check is skipped.
        settings: Required/optional file conventions (defaults from env).

    Returns:
        StructureReport with errors and warnings in a fixed order.
    """
    settings = settings or load_settings()
    report = StructureReport()

    report.errors.extend(check_pipeline_rules(pipeline))

    for name in settings.required_cell_files_list:
        if not layout.has(name):
            report.errors.append(f"Required file missing: {name}")

    source = manifest.data_contract.source
    if "." not in source:
        report.warnings.append(
            "Data contract source should reference a remote procedure "
            '(e.g., "projects.getById")'
        )
    if source_exists is not None and not source_exists(source):
        report.warnings.append(f"Data contract source {source!r} not found in API surface")

    for assertion in manifest.behavioral_assertions:
        if assertion.test_file and not layout.has(assertion.test_file):
            report.warnings.append(
                f"Behavioral assertion {assertion.id!r} references missing "
                f"test file: {assertion.test_file}"
            )

    if settings.warn_on_disabled_gates:
        for name, gate in pipeline.gates.items():
            if not gate.enabled:
                report.warnings.append(f"Gate '{name}' is disabled")

    if not pipeline.success_criteria.all_gates_must_pass:
        report.warnings.append("Success criteria does not require all gates to pass")

    for name in settings.optional_cell_files_list:
        if not layout.has(name):
            report.warnings.append(f"Optional file missing: {name}")

    logger.debug(
        "Structure checked: %d error(s), %d warning(s)",
        len(report.errors),
        len(report.warnings),
    )
    return report
