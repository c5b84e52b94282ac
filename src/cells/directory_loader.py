# src/cells/directory_loader.py — v1
"""Filesystem Cell loader (default).

A Cell is a directory holding a JSON manifest and a YAML pipeline next to
its implementation and test files. File names come from Settings.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from cellgov.cells.base_loader import BaseCellLoader, CellLoadError
from cellgov.cells.models import UnitLayout
from cellgov.config.settings import Settings, load_settings

logger = logging.getLogger(__name__)

# Directories never considered part of a Cell's own files.
_IGNORED_DIRS = frozenset({"node_modules", ".git", "__pycache__"})


class DirectoryCellLoader(BaseCellLoader):
    """Load Cells from directories on disk."""

    def __init__(self, settings: Settings | None = None) -> None:
        self._settings = settings or load_settings()

    def list_files(self, location: str | Path) -> UnitLayout:
        root = self._cell_dir(location)
        files = [
            path.relative_to(root).as_posix()
            for path in sorted(root.rglob("*"))
            if path.is_file() and not _IGNORED_DIRS.intersection(path.relative_to(root).parts)
        ]
        return UnitLayout.of(files)

    def load_manifest(self, location: str | Path) -> Any:
        name = self._settings.manifest_filename
        text = self._read(Path(location) / name, name)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise CellLoadError("parse_error", f"Failed to parse {name}: {e}") from e

    def load_pipeline(self, location: str | Path) -> Any:
        name = self._settings.pipeline_filename
        text = self._read(Path(location) / name, name)
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise CellLoadError("parse_error", f"Failed to parse {name}: {e}") from e

    def discover(self, root: str | Path) -> list[str]:
        root_path = Path(root)
        if not root_path.is_dir():
            raise CellLoadError("not_found", f"Cells root is not a directory: {root}")
        manifest_name = self._settings.manifest_filename
        return [
            str(child)
            for child in sorted(root_path.iterdir())
            if child.is_dir() and (child / manifest_name).is_file()
        ]

    @staticmethod
    def _cell_dir(location: str | Path) -> Path:
        path = Path(location)
        if not path.exists():
            raise CellLoadError("not_found", f"Cell path does not exist: {location}")
        if not path.is_dir():
            raise CellLoadError("not_found", f"Cell path is not a directory: {location}")
        return path

    @staticmethod
    def _read(path: Path, name: str) -> str:
        if not path.is_file():
            raise CellLoadError("not_found", f"{name} not found")
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read %s: %s", path, e)
            raise CellLoadError("parse_error", f"Failed to parse {name}: {e}") from e
