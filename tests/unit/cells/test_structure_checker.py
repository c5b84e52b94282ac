# tests/unit/cells/test_structure_checker.py — v1
"""Tests for cells/structure_checker.py."""

from __future__ import annotations

import pytest

from cellgov.cells.models import CellManifest, CellPipeline, UnitLayout
from cellgov.cells.structure_checker import (
    COVERAGE_REQUIRES_TESTS,
    check_pipeline_rules,
    check_structure,
)

FULL_LAYOUT = UnitLayout.of(
    ["manifest.json", "pipeline.yaml", "component.tsx", "state.ts", "README.md", "index.ts"]
)


@pytest.fixture
def manifest(manifest_doc) -> CellManifest:
    return CellManifest.model_validate(manifest_doc)


@pytest.fixture
def pipeline(pipeline_doc) -> CellPipeline:
    return CellPipeline.model_validate(pipeline_doc)


def _pipeline(pipeline_doc, **changes) -> CellPipeline:
    if "unit_tests_enabled" in changes:
        pipeline_doc["gates"]["unitTests"]["enabled"] = changes["unit_tests_enabled"]
    if "min_coverage" in changes:
        pipeline_doc["successCriteria"]["minCoverage"] = changes["min_coverage"]
    return CellPipeline.model_validate(pipeline_doc)


class TestCoverageRule:
    def test_coverage_without_unit_tests(self, manifest, pipeline_doc, settings):
        pipeline = _pipeline(pipeline_doc, unit_tests_enabled=False, min_coverage=80)
        report = check_structure(manifest, pipeline, FULL_LAYOUT, settings=settings)
        assert report.errors == [COVERAGE_REQUIRES_TESTS]

    def test_coverage_with_unit_tests(self, pipeline_doc):
        pipeline = _pipeline(pipeline_doc, min_coverage=80)
        assert check_pipeline_rules(pipeline) == []

    def test_disabled_tests_without_coverage(self, pipeline_doc):
        pipeline = _pipeline(pipeline_doc, unit_tests_enabled=False)
        assert check_pipeline_rules(pipeline) == []

    def test_zero_coverage_still_counts_as_set(self, pipeline_doc):
        pipeline = _pipeline(pipeline_doc, unit_tests_enabled=False, min_coverage=0)
        assert check_pipeline_rules(pipeline) == [COVERAGE_REQUIRES_TESTS]


class TestLayout:
    def test_complete_cell_is_clean(self, manifest, pipeline, settings):
        report = check_structure(manifest, pipeline, FULL_LAYOUT, settings=settings)
        assert report.errors == []
        assert report.warnings == []

    def test_documents_alone_are_not_a_valid_cell(self, manifest, pipeline, settings):
        layout = UnitLayout.of(["manifest.json", "pipeline.yaml"])
        report = check_structure(manifest, pipeline, layout, settings=settings)
        assert report.errors == [
            "Required file missing: component.tsx",
            "Required file missing: state.ts",
        ]

    def test_required_files_missing(self, manifest, pipeline, settings):
        layout = UnitLayout.of(["manifest.json", "pipeline.yaml", "README.md", "index.ts"])
        report = check_structure(manifest, pipeline, layout, settings=settings)
        assert report.errors == [
            "Required file missing: component.tsx",
            "Required file missing: state.ts",
        ]

    def test_optional_files_missing_are_warnings(self, manifest, pipeline, settings):
        layout = UnitLayout.of(["manifest.json", "pipeline.yaml", "component.tsx", "state.ts"])
        report = check_structure(manifest, pipeline, layout, settings=settings)
        assert report.errors == []
        assert report.warnings == [
            "Optional file missing: README.md",
            "Optional file missing: index.ts",
        ]

    def test_missing_test_file_is_warning(self, manifest_doc, pipeline, settings):
        manifest_doc["behavioralAssertions"][0]["testFile"] = "__tests__/a1.test.tsx"
        manifest = CellManifest.model_validate(manifest_doc)
        report = check_structure(manifest, pipeline, FULL_LAYOUT, settings=settings)
        assert report.errors == []
        assert report.warnings == [
            "Behavioral assertion 'a1' references missing test file: __tests__/a1.test.tsx"
        ]

    def test_present_test_file(self, manifest_doc, pipeline, settings):
        manifest_doc["behavioralAssertions"][0]["testFile"] = "./__tests__/a1.test.tsx"
        manifest = CellManifest.model_validate(manifest_doc)
        layout = UnitLayout.of([*FULL_LAYOUT.files, "__tests__/a1.test.tsx"])
        report = check_structure(manifest, pipeline, layout, settings=settings)
        assert report.warnings == []

    def test_custom_required_files(self, manifest, pipeline):
        from cellgov.config.settings import Settings

        settings = Settings(
            _env_file=None,
            required_cell_files="manifest.json,pipeline.yaml",
            optional_cell_files="",
        )
        layout = UnitLayout.of(["manifest.json", "pipeline.yaml"])
        report = check_structure(manifest, pipeline, layout, settings=settings)
        assert report.errors == [] and report.warnings == []


class TestDataContractSource:
    def test_existence_check_skipped_without_resolver(self, manifest, pipeline, settings):
        report = check_structure(manifest, pipeline, FULL_LAYOUT, settings=settings)
        assert not any("API surface" in w for w in report.warnings)

    def test_unknown_source_is_warning(self, manifest, pipeline, settings):
        calls = []

        def exists(source: str) -> bool:
            calls.append(source)
            return False

        report = check_structure(
            manifest, pipeline, FULL_LAYOUT, source_exists=exists, settings=settings
        )
        assert calls == ["kpi.get"]
        assert report.errors == []
        assert report.warnings == ["Data contract source 'kpi.get' not found in API surface"]

    def test_known_source(self, manifest, pipeline, settings):
        report = check_structure(
            manifest, pipeline, FULL_LAYOUT, source_exists=lambda s: True, settings=settings
        )
        assert report.warnings == []

    def test_source_without_procedure_path(self, manifest_doc, pipeline, settings):
        manifest_doc["dataContract"]["source"] = "kpis"
        manifest = CellManifest.model_validate(manifest_doc)
        report = check_structure(manifest, pipeline, FULL_LAYOUT, settings=settings)
        assert len(report.warnings) == 1
        assert "should reference a remote procedure" in report.warnings[0]


class TestGateWarnings:
    def test_disabled_gates(self, manifest, pipeline_doc, settings):
        pipeline_doc["gates"]["lint"]["enabled"] = False
        pipeline_doc["gates"]["typeCheck"]["enabled"] = False
        pipeline = CellPipeline.model_validate(pipeline_doc)
        report = check_structure(manifest, pipeline, FULL_LAYOUT, settings=settings)
        assert report.warnings == ["Gate 'typeCheck' is disabled", "Gate 'lint' is disabled"]

    def test_disabled_gate_warning_can_be_turned_off(self, manifest, pipeline_doc):
        from cellgov.config.settings import Settings

        pipeline_doc["gates"]["lint"]["enabled"] = False
        pipeline = CellPipeline.model_validate(pipeline_doc)
        settings = Settings(_env_file=None, warn_on_disabled_gates=False)
        report = check_structure(manifest, pipeline, FULL_LAYOUT, settings=settings)
        assert report.warnings == []

    def test_lax_success_criteria(self, manifest, pipeline_doc, settings):
        pipeline_doc["successCriteria"]["allGatesMustPass"] = False
        pipeline = CellPipeline.model_validate(pipeline_doc)
        report = check_structure(manifest, pipeline, FULL_LAYOUT, settings=settings)
        assert report.warnings == ["Success criteria does not require all gates to pass"]
