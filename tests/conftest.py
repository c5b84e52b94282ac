# tests/conftest.py — v1
"""Shared test fixtures for all unit and integration tests.

Provides valid manifest/pipeline documents, an isolated Settings instance,
an in-memory loader and a ledger entry factory. No network access; disk
access only through tmp_path.
"""

from __future__ import annotations

import copy
from datetime import datetime, timezone
from typing import Any, Callable

import pytest

from cellgov.cells.memory_loader import InMemoryCellLoader
from cellgov.config.settings import Settings
from cellgov.logging.context import clear_context
from cellgov.ledger.models import LedgerEntry

REQUIRED_FILES = ["component.tsx", "state.ts"]
OPTIONAL_FILES = ["README.md", "index.ts"]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch):
    """Keep CELLGOV_* variables from the host out of every test."""
    import os

    for key in list(os.environ):
        if key.startswith("CELLGOV_"):
            monkeypatch.delenv(key, raising=False)
    clear_context()
    yield
    clear_context()


# === FIXTURES: Cell documents ===


@pytest.fixture
def settings() -> Settings:
    """Default settings, ignoring any .env in the working directory."""
    return Settings(_env_file=None)


@pytest.fixture
def manifest_doc() -> dict[str, Any]:
    """Minimal valid manifest (the KPI card Cell)."""
    return {
        "id": "kpi-card",
        "version": "1.0.0",
        "description": "KPI display",
        "dataContract": {"source": "kpi.get"},
        "behavioralAssertions": [{"id": "a1", "description": "shows value"}],
    }


@pytest.fixture
def pipeline_doc() -> dict[str, Any]:
    """Pipeline with all four gates enabled and no coverage floor."""
    return {
        "name": "kpi-card-pipeline",
        "gates": {
            "typeCheck": {"command": "tsc --noEmit", "enabled": True},
            "lint": {"command": "eslint .", "enabled": True},
            "unitTests": {"command": "vitest run", "enabled": True},
            "behavioralAssertions": {"command": "vitest run assertions", "enabled": True},
        },
        "successCriteria": {"allGatesMustPass": True},
    }


@pytest.fixture
def cell_files() -> list[str]:
    """Implementation files of a complete Cell (manifest/pipeline added by the loader)."""
    return REQUIRED_FILES + OPTIONAL_FILES


@pytest.fixture
def memory_loader(settings: Settings) -> InMemoryCellLoader:
    return InMemoryCellLoader(settings)


@pytest.fixture
def add_cell(
    memory_loader: InMemoryCellLoader,
    manifest_doc: dict[str, Any],
    pipeline_doc: dict[str, Any],
    cell_files: list[str],
) -> Callable[..., str]:
    """Register a Cell built from the valid documents plus overrides."""

    def _add(
        location: str = "cells/kpi-card",
        manifest: Any = ...,
        pipeline: Any = ...,
        files: list[str] | None = None,
    ) -> str:
        memory_loader.add_cell(
            location,
            manifest=copy.deepcopy(manifest_doc) if manifest is ... else manifest,
            pipeline=copy.deepcopy(pipeline_doc) if pipeline is ... else pipeline,
            files=list(cell_files) if files is None else files,
        )
        return location

    return _add


# === FIXTURES: Ledger ===


@pytest.fixture
def make_entry() -> Callable[..., LedgerEntry]:
    """Build a LedgerEntry with sensible defaults."""

    def _make(
        iteration_id: int | str = 1,
        timestamp: datetime | None = None,
        human_prompt: str = "Create KPI Card Cell",
        created: list[dict[str, Any]] | None = None,
        modified: list[dict[str, Any]] | None = None,
        schema_changes: list[dict[str, Any]] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> LedgerEntry:
        return LedgerEntry.model_validate(
            {
                "iterationId": iteration_id,
                "timestamp": timestamp or datetime(2025, 1, 1, tzinfo=timezone.utc),
                "humanPrompt": human_prompt,
                "artifacts": {
                    "created": created or [],
                    "modified": modified or [],
                },
                "schemaChanges": schema_changes or [],
                "metadata": metadata,
            }
        )

    return _make
