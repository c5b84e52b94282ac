# src/cells/base_loader.py — v1
"""Abstract Cell document loader interface.

A loader turns a Cell location into a file listing and parsed manifest and
pipeline documents. Failures are raised as CellLoadError and converted to a
single validation error by the orchestrator.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Literal

from cellgov.cells.models import UnitLayout

LoadErrorKind = Literal["not_found", "parse_error"]


class CellLoadError(Exception):
    """A document or listing could not be produced."""

    def __init__(self, kind: LoadErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind


class BaseCellLoader(ABC):
    """Unified interface for Cell document sources."""

    @abstractmethod
    def list_files(self, location: str | Path) -> UnitLayout:
        """List files belonging to the Cell."""

    @abstractmethod
    def load_manifest(self, location: str | Path) -> Any:
        """Return the parsed manifest document."""

    @abstractmethod
    def load_pipeline(self, location: str | Path) -> Any:
        """Return the parsed pipeline document."""

    @abstractmethod
    def discover(self, root: str | Path) -> list[str]:
        """Return Cell locations under root, sorted."""
