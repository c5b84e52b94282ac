# src/cells/schema.py — v1
"""Contract schema for Cell manifests and pipelines, expressed as rule tables.

Rules run in table order, parents before children, so error output is
stable for identical input. Wire keys are camelCase.
"""

from __future__ import annotations

from cellgov.cells.rules import (
    FieldRule,
    is_bool,
    is_non_empty_list,
    is_non_empty_str,
    is_object,
    is_str,
    is_unique_str_list,
    matches,
    number_between,
)

MANIFEST_LABEL = "Manifest validation error"
PIPELINE_LABEL = "Pipeline validation error"

SEMVER_PATTERN = r"\d+\.\d+\.\d+"

GATE_NAMES: tuple[str, ...] = ("typeCheck", "lint", "unitTests", "behavioralAssertions")

_PERCENT = number_between(0, 100)

MANIFEST_RULES: list[FieldRule] = [
    FieldRule("id", is_non_empty_str, "non-empty string", "Cell ID is required"),
    FieldRule(
        "version",
        matches(SEMVER_PATTERN),
        "string MAJOR.MINOR.PATCH",
        "Version must be in semver format (e.g., 1.0.0)",
    ),
    FieldRule("description", is_non_empty_str, "non-empty string", "Description is required"),
    FieldRule("dataContract", is_object, "object with a 'source' string"),
    FieldRule(
        "dataContract.source",
        is_non_empty_str,
        "non-empty string",
        "Data contract source (remote procedure) is required",
    ),
    FieldRule("dataContract.inputSchema", is_str, "string", required=False),
    FieldRule("dataContract.outputSchema", is_str, "string", required=False),
    FieldRule(
        "behavioralAssertions",
        is_non_empty_list,
        "non-empty list of assertions",
        "At least one behavioral assertion is required",
    ),
    FieldRule(
        "behavioralAssertions.*",
        is_object,
        "object with 'id' and 'description'",
    ),
    FieldRule(
        "behavioralAssertions.*.id",
        is_non_empty_str,
        "non-empty string",
        "Assertion ID is required",
    ),
    FieldRule(
        "behavioralAssertions.*.description",
        is_non_empty_str,
        "non-empty string",
        "Assertion description is required",
    ),
    FieldRule("behavioralAssertions.*.testFile", is_str, "string", required=False),
    FieldRule("dependencies", is_unique_str_list, "list of unique strings", required=False),
    FieldRule("tags", is_unique_str_list, "list of unique strings", required=False),
]


def _gate_rules(gate: str) -> list[FieldRule]:
    rules = [
        FieldRule(f"gates.{gate}", is_object, "object with 'command' and 'enabled'"),
        FieldRule(
            f"gates.{gate}.command",
            is_non_empty_str,
            "non-empty command string",
        ),
        FieldRule(f"gates.{gate}.enabled", is_bool, "boolean", required=False),
    ]
    if gate == "unitTests":
        rules.append(
            FieldRule(
                "gates.unitTests.coverage",
                _PERCENT,
                "number between 0 and 100",
                required=False,
            )
        )
    return rules


PIPELINE_RULES: list[FieldRule] = [
    FieldRule("name", is_non_empty_str, "non-empty string", "Pipeline name is required"),
    FieldRule("gates", is_object, "object with gates " + ", ".join(GATE_NAMES)),
    *[rule for gate in GATE_NAMES for rule in _gate_rules(gate)],
    FieldRule("successCriteria", is_object, "object with 'allGatesMustPass'"),
    FieldRule("successCriteria.allGatesMustPass", is_bool, "boolean", required=False),
    FieldRule(
        "successCriteria.minCoverage",
        _PERCENT,
        "number between 0 and 100",
        required=False,
    ),
]
