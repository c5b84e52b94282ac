# src/ledger/base_backend.py — v1
"""Abstract ledger persistence interface.

Backends must preserve append order and never rewrite stored entries.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from cellgov.ledger.models import LedgerEntry


class BaseLedgerBackend(ABC):
    """Storage medium behind a LedgerStore."""

    @abstractmethod
    def load(self) -> Iterable[LedgerEntry]:
        """Return previously stored entries in append order."""

    @abstractmethod
    def append(self, entry: LedgerEntry) -> None:
        """Durably store one entry after all existing ones."""
