# src/cells/rules.py — v1
"""Declarative field rules and the generic runner that evaluates them.

A rule binds a dotted field path to a check function, a description of the
expected shape and an optional message. Paths may contain ``*`` to address
every element of a list (``behavioralAssertions.*.id``).

Resolution semantics:
- A missing leaf is reported only when the rule is required.
- A missing or wrongly typed parent yields nothing, so its children stay
  silent and the parent's own rule carries the single error.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable

Check = Callable[[Any], bool]


class _Missing:
    def __repr__(self) -> str:
        return "<missing>"


MISSING: Any = _Missing()


@dataclass(frozen=True)
class FieldRule:
    """One field constraint."""

    path: str
    check: Check
    expected: str
    message: str | None = None
    required: bool = True


# === Checks ===


def is_object(value: Any) -> bool:
    return isinstance(value, dict)


def is_str(value: Any) -> bool:
    return isinstance(value, str)


def is_non_empty_str(value: Any) -> bool:
    return isinstance(value, str) and value.strip() != ""


def is_bool(value: Any) -> bool:
    return isinstance(value, bool)


def is_number(value: Any) -> bool:
    # bool is an int subclass; a YAML `true` is not a coverage figure.
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def number_between(low: float, high: float) -> Check:
    def check(value: Any) -> bool:
        return is_number(value) and low <= value <= high

    return check


def matches(pattern: str) -> Check:
    compiled = re.compile(pattern)

    def check(value: Any) -> bool:
        return isinstance(value, str) and compiled.fullmatch(value) is not None

    return check


def is_non_empty_list(value: Any) -> bool:
    return isinstance(value, list) and len(value) > 0


def is_unique_str_list(value: Any) -> bool:
    return (
        isinstance(value, list)
        and all(isinstance(v, str) for v in value)
        and len(set(value)) == len(value)
    )


# === Runner ===


def describe(value: Any) -> str:
    """Short, deterministic description of a value for error messages."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return f"boolean {str(value).lower()}"
    if isinstance(value, str):
        text = value if len(value) <= 40 else value[:37] + "..."
        return f"string {text!r}"
    if isinstance(value, (int, float)):
        return f"number {value}"
    if isinstance(value, list):
        return "empty list" if not value else f"list of {len(value)}"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def resolve(doc: Any, path: str) -> list[tuple[str, Any]]:
    """Expand a rule path into (concrete_path, value) pairs.

    Missing leaves resolve to ``MISSING``; unreachable branches are dropped.
    """
    segments = path.split(".")
    current: list[tuple[str, Any]] = [("", doc)]
    for i, segment in enumerate(segments):
        is_leaf = i == len(segments) - 1
        following: list[tuple[str, Any]] = []
        for prefix, value in current:
            if segment == "*":
                if not isinstance(value, list):
                    continue
                for idx, item in enumerate(value):
                    following.append((_join(prefix, str(idx)), item))
                continue
            if not isinstance(value, dict):
                continue
            concrete = _join(prefix, segment)
            if segment in value:
                following.append((concrete, value[segment]))
            elif is_leaf:
                following.append((concrete, MISSING))
        current = following
    return current


def run_rules(doc: Any, rules: list[FieldRule], label: str) -> list[str]:
    """Evaluate rules in order against a document and collect error strings.

    Never raises for malformed input.
    """
    if not isinstance(doc, dict):
        return [f"{label}: <root>: expected an object, got {describe(doc)}"]

    errors: list[str] = []
    for rule in rules:
        for field_path, value in resolve(doc, rule.path):
            if value is MISSING:
                if rule.required:
                    errors.append(
                        f"{label}: {field_path}: Required (expected {rule.expected})"
                    )
                continue
            if rule.check(value):
                continue
            detail = rule.message or f"expected {rule.expected}"
            errors.append(f"{label}: {field_path}: {detail}, got {describe(value)}")
    return errors


def _join(prefix: str, segment: str) -> str:
    return f"{prefix}.{segment}" if prefix else segment
