# src/cells/memory_loader.py — v1
"""In-memory Cell loader for tests and embedding callers.

Documents may be registered already parsed (dict) or as raw text, in which
case they go through the same JSON/YAML parsers as the directory loader.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from cellgov.cells.base_loader import BaseCellLoader, CellLoadError
from cellgov.cells.models import UnitLayout
from cellgov.config.settings import Settings, load_settings


@dataclass
class _CellRecord:
    manifest: Any = None
    pipeline: Any = None
    files: list[str] = field(default_factory=list)


class InMemoryCellLoader(BaseCellLoader):
    """Cells keyed by location string."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or load_settings()
        self._cells: dict[str, _CellRecord] = {}

    def add_cell(
        self,
        location: str,
        manifest: Any = None,
        pipeline: Any = None,
        files: list[str] | None = None,
    ) -> None:
        """Register a Cell. ``None`` for a document means the file is absent."""
        listing = list(files or [])
        if manifest is not None:
            listing.append(self._settings.manifest_filename)
        if pipeline is not None:
            listing.append(self._settings.pipeline_filename)
        self._cells[location] = _CellRecord(manifest=manifest, pipeline=pipeline, files=listing)

    def list_files(self, location: str | Path) -> UnitLayout:
        return UnitLayout.of(self._record(location).files)

    def load_manifest(self, location: str | Path) -> Any:
        name = self._settings.manifest_filename
        doc = self._record(location).manifest
        if doc is None:
            raise CellLoadError("not_found", f"{name} not found")
        if isinstance(doc, str):
            try:
                return json.loads(doc)
            except json.JSONDecodeError as e:
                raise CellLoadError("parse_error", f"Failed to parse {name}: {e}") from e
        return doc

    def load_pipeline(self, location: str | Path) -> Any:
        name = self._settings.pipeline_filename
        doc = self._record(location).pipeline
        if doc is None:
            raise CellLoadError("not_found", f"{name} not found")
        if isinstance(doc, str):
            try:
                return yaml.safe_load(doc)
            except yaml.YAMLError as e:
                raise CellLoadError("parse_error", f"Failed to parse {name}: {e}") from e
        return doc

    def discover(self, root: str | Path) -> list[str]:
        prefix = str(root).rstrip("/") + "/"
        return sorted(
            loc
            for loc, record in self._cells.items()
            if loc.startswith(prefix) and record.manifest is not None
        )

    def _record(self, location: str | Path) -> _CellRecord:
        record = self._cells.get(str(location))
        if record is None:
            raise CellLoadError("not_found", f"Cell path does not exist: {location}")
        return record
