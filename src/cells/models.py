# src/cells/models.py — v1
"""Typed Cell document shapes and validation result types.

The pydantic models are built only from documents that already passed the
rule tables in cells/schema.py; they give the structural checker typed
access with defaults applied (``enabled`` and ``allGatesMustPass`` default
to true). Attribute names are snake_case, wire keys camelCase.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CellModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


# === MANIFEST ===


class DataContract(_CellModel):
    """Remote procedure supplying the Cell's data."""

    source: str
    input_schema: str | None = None
    output_schema: str | None = None


class BehavioralAssertion(_CellModel):
    id: str
    description: str
    test_file: str | None = None


class CellManifest(_CellModel):
    """manifest.json: identity, data contract and behavioral assertions."""

    id: str
    version: str
    description: str
    data_contract: DataContract
    behavioral_assertions: tuple[BehavioralAssertion, ...]
    dependencies: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()


# === PIPELINE ===


class Gate(_CellModel):
    command: str
    enabled: bool = True


class UnitTestsGate(Gate):
    coverage: float | None = None


class PipelineGates(_CellModel):
    type_check: Gate
    lint: Gate
    unit_tests: UnitTestsGate
    behavioral_assertions: Gate

    def items(self) -> list[tuple[str, Gate]]:
        """Gates in declaration order, keyed by wire name."""
        return [
            (to_camel(name), getattr(self, name))
            for name in type(self).model_fields
        ]


class SuccessCriteria(_CellModel):
    all_gates_must_pass: bool = True
    min_coverage: float | None = None


class CellPipeline(_CellModel):
    """pipeline.yaml: quality gates and success criteria."""

    name: str
    gates: PipelineGates
    success_criteria: SuccessCriteria


# === LAYOUT ===


def _normalize(path: str) -> str:
    return PurePosixPath(path.replace("\\", "/")).as_posix().lstrip("/")


@dataclass(frozen=True)
class UnitLayout:
    """Files belonging to a Cell, as POSIX paths relative to the Cell root."""

    files: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def of(cls, paths: Iterable[str]) -> UnitLayout:
        return cls(files=frozenset(_normalize(p) for p in paths))

    def has(self, path: str) -> bool:
        return _normalize(path) in self.files


# === RESULTS ===


@dataclass
class DocumentReport:
    """Errors from validating one document against its rule table."""

    errors: list[str] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.errors


@dataclass
class StructureReport:
    """Cross-document and layout findings."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


@dataclass
class ValidationResult:
    """Outcome of one orchestrated pass over a Cell.

    ``valid`` is derived from ``errors``; warnings never affect it.
    """

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    cell_path: str = ""

    @property
    def valid(self) -> bool:
        return not self.errors

    def as_dict(self) -> dict[str, Any]:
        return {
            "valid": self.valid,
            "errors": list(self.errors),
            "warnings": list(self.warnings),
            "cellPath": self.cell_path,
        }
