# src/cells/manifest_validator.py — v1
"""Manifest validation: rule table plus assertion-id uniqueness."""

from __future__ import annotations

import logging
from typing import Any

from cellgov.cells.models import DocumentReport
from cellgov.cells.schema import MANIFEST_LABEL, MANIFEST_RULES
from cellgov.cells.rules import run_rules

logger = logging.getLogger(__name__)


def validate_manifest(doc: Any) -> DocumentReport:
    """Validate a parsed manifest document.

    Args:
        doc: Parsed manifest (normally a dict loaded from manifest.json).

    Returns:
        DocumentReport with one error per offending field, in rule order,
        followed by one error per duplicated assertion id.
    """
    errors = run_rules(doc, MANIFEST_RULES, MANIFEST_LABEL)
    errors.extend(_duplicate_assertion_errors(doc))
    logger.debug("Manifest checked: %d error(s)", len(errors))
    return DocumentReport(errors=errors)


def _duplicate_assertion_errors(doc: Any) -> list[str]:
    if not isinstance(doc, dict):
        return []
    assertions = doc.get("behavioralAssertions")
    if not isinstance(assertions, list):
        return []

    seen: set[str] = set()
    reported: list[str] = []
    for assertion in assertions:
        if not isinstance(assertion, dict):
            continue
        assertion_id = assertion.get("id")
        if not isinstance(assertion_id, str) or not assertion_id:
            continue
        if assertion_id in seen and assertion_id not in reported:
            reported.append(assertion_id)
        seen.add(assertion_id)

    return [
        f"{MANIFEST_LABEL}: behavioralAssertions: "
        f"Behavioral assertion IDs must be unique (duplicate {dup!r})"
        for dup in reported
    ]
