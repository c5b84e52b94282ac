# src/ledger/memory_backend.py — v1
"""Process-local ledger backend (default for LedgerStore)."""

from __future__ import annotations

from cellgov.ledger.base_backend import BaseLedgerBackend
from cellgov.ledger.models import LedgerEntry


class InMemoryLedgerBackend(BaseLedgerBackend):
    """Keeps entries in a list; nothing survives the process."""

    def __init__(self, entries: list[LedgerEntry] | None = None) -> None:
        self._entries: list[LedgerEntry] = list(entries or [])

    def load(self) -> list[LedgerEntry]:
        return list(self._entries)

    def append(self, entry: LedgerEntry) -> None:
        self._entries.append(entry)
