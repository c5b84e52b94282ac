# src/ledger/backend_factory.py — v1
"""Factory: instantiate ledger backend from configuration."""

from __future__ import annotations

from cellgov.config.settings import Settings
from cellgov.ledger.base_backend import BaseLedgerBackend
from cellgov.ledger.jsonl_backend import JsonlLedgerBackend
from cellgov.ledger.memory_backend import InMemoryLedgerBackend


def create_backend(settings: Settings) -> BaseLedgerBackend:
    """Create the ledger backend named by CELLGOV_LEDGER_BACKEND.

    Raises:
        ValueError: If backend type is not supported.
    """
    if settings.ledger_backend == "jsonl":
        return JsonlLedgerBackend(settings.ledger_path)

    if settings.ledger_backend == "memory":
        return InMemoryLedgerBackend()

    raise ValueError(f"Unsupported ledger backend: {settings.ledger_backend!r}")
