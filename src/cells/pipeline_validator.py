# src/cells/pipeline_validator.py — v1
"""Pipeline validation: rule table plus unknown-gate detection."""

from __future__ import annotations

import logging
from typing import Any

from cellgov.cells.models import DocumentReport
from cellgov.cells.rules import run_rules
from cellgov.cells.schema import GATE_NAMES, PIPELINE_LABEL, PIPELINE_RULES

logger = logging.getLogger(__name__)


def validate_pipeline(doc: Any) -> DocumentReport:
    """Validate a parsed pipeline document.

    Gate ``enabled`` flags and ``allGatesMustPass`` are optional here; they
    default to true when the typed CellPipeline is built.
    """
    errors = run_rules(doc, PIPELINE_RULES, PIPELINE_LABEL)

    gates = doc.get("gates") if isinstance(doc, dict) else None
    if isinstance(gates, dict):
        for name in gates:
            if name not in GATE_NAMES:
                errors.append(
                    f"{PIPELINE_LABEL}: gates.{name}: unknown gate "
                    f"(expected one of {', '.join(GATE_NAMES)})"
                )

    logger.debug("Pipeline checked: %d error(s)", len(errors))
    return DocumentReport(errors=errors)
